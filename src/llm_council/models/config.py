from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_core.core_schema import ValidationInfo
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv


def load_env(env_file: str | Path | None = None) -> None:
	"""Load environment variables from an `.env` file if present."""
	env_path = Path(env_file) if env_file else Path(".env")
	if env_path.exists():
		load_dotenv(env_path)


class JudgeMode(str, Enum):
	"""
	Isolation modes for the judge channel.

	SAME_SESSION: Reuse an existing channel for the judge agent if any.
	INCOGNITO: Always open a fresh, isolated channel.
	SEPARATE_WINDOW: Always open a fresh, non-isolated channel.
	"""

	SAME_SESSION = "same-session"
	INCOGNITO = "incognito"
	SEPARATE_WINDOW = "separate-window"


class Config(BaseSettings):
	"""Runtime configuration loaded from environment variables."""

	model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

	cli_url: str | None = Field(
	    default=None,
	    alias="COPILOT_CLI_URL",
	    description=
	    "External Copilot CLI server URL. If unset, spawns native CLI via stdio.",
	)
	model: str = Field(
	    "gpt-4.1",
	    alias="COPILOT_MODEL",
	    description="Fallback model for agents without their own",
	)
	log_level: str = Field("info", alias="LOG_LEVEL",
	                       description="Log level")
	github_token: str | None = Field(
	    default=None,
	    alias="GITHUB_TOKEN",
	    description="GitHub token used to authenticate the Copilot CLI",
	)
	council_timeout_seconds: float = Field(
	    120,
	    alias="COUNCIL_TIMEOUT_SECONDS",
	    description="Shared deadline for the council round",
	)
	judge_timeout_seconds: float = Field(
	    180,
	    alias="JUDGE_TIMEOUT_SECONDS",
	    description="Deadline for the judge response",
	)
	poll_interval_seconds: float = Field(
	    2.0,
	    alias="POLL_INTERVAL_SECONDS",
	    description="Sleep between completion polls",
	)
	poll_call_timeout_seconds: float = Field(
	    10.0,
	    alias="POLL_CALL_TIMEOUT_SECONDS",
	    description="Upper bound for a single completion poll",
	)
	injection_delay_seconds: float = Field(
	    1.5,
	    alias="INJECTION_DELAY_SECONDS",
	    description="Delay between successive council deliveries",
	)
	delivery_attempts: int = Field(
	    3,
	    alias="DELIVERY_ATTEMPTS",
	    description="Delivery attempts before an agent is marked failed",
	)
	delivery_backoff_seconds: float = Field(
	    1.0,
	    alias="DELIVERY_BACKOFF_SECONDS",
	    description="Fixed backoff between delivery attempts",
	)
	delivery_init_delay_seconds: float = Field(
	    0.5,
	    alias="DELIVERY_INIT_DELAY_SECONDS",
	    description="Initialization delay, multiplied by the attempt number",
	)
	delivery_timeout_seconds: float = Field(
	    30.0,
	    alias="DELIVERY_TIMEOUT_SECONDS",
	    description="Upper bound for a single delivery attempt",
	)
	submit_delay_seconds: float = Field(
	    0.5,
	    alias="SUBMIT_DELAY_SECONDS",
	    description="Pause between setting text and submitting it",
	)
	load_timeout_seconds: float = Field(
	    30.0,
	    alias="LOAD_TIMEOUT_SECONDS",
	    description="Upper bound for opening or loading a channel",
	)
	settle_seconds: float = Field(
	    2.0,
	    alias="SETTLE_SECONDS",
	    description="Wait after a load signal before using a new channel",
	)
	discovery_retry_delay_seconds: float = Field(
	    3.0,
	    alias="DISCOVERY_RETRY_DELAY_SECONDS",
	    description="Delay before re-attempting channel discovery",
	)
	discovery_attempts: int = Field(
	    2,
	    alias="DISCOVERY_ATTEMPTS",
	    description="Discovery attempts before an agent is unreachable",
	)
	default_judge: str = Field("gemini", alias="DEFAULT_JUDGE",
	                           description="Judge agent id")
	judge_mode: JudgeMode = Field(
	    JudgeMode.INCOGNITO,
	    alias="JUDGE_MODE",
	    description="Judge channel isolation mode",
	)
	judge_prompt_file: str | None = Field(
	    default=None,
	    alias="JUDGE_PROMPT_FILE",
	    description="Custom chairman prompt template",
	)
	preferences_file: str = Field(
	    "~/.config/llm-council/preferences.yaml",
	    alias="PREFERENCES_FILE",
	    description="Where the last selections are remembered",
	)

	@field_validator("council_timeout_seconds", "judge_timeout_seconds",
	                 "poll_interval_seconds", "poll_call_timeout_seconds",
	                 "delivery_attempts", "delivery_timeout_seconds",
	                 "load_timeout_seconds", "discovery_attempts")
	@classmethod
	def validate_positive(cls, v: Any, info: ValidationInfo) -> Any:
		if v is None:
			return v
		if v <= 0:
			raise ValueError(f"{info.field_name} must be > 0")
		return v

	@field_validator("injection_delay_seconds", "delivery_backoff_seconds",
	                 "delivery_init_delay_seconds", "submit_delay_seconds",
	                 "settle_seconds", "discovery_retry_delay_seconds")
	@classmethod
	def validate_non_negative(cls, v: Any, info: ValidationInfo) -> Any:
		if v < 0:
			raise ValueError(f"{info.field_name} must be >= 0")
		return v

	@model_validator(mode="after")
	def judge_outlasts_council(self) -> "Config":
		"""The judge reads every council answer, so it gets more time."""
		if self.judge_timeout_seconds <= self.council_timeout_seconds:
			raise ValueError(
			    "judge_timeout_seconds must be greater than "
			    "council_timeout_seconds")
		return self

	@property
	def use_native_cli(self) -> bool:
		"""Return True when using native stdio mode (no external server)."""
		return not self.cli_url

	@property
	def preferences_path(self) -> Path:
		"""Return preferences_file as an expanded Path."""
		return Path(self.preferences_file).expanduser()

	def apply_overrides(self, run_params: "RunParams") -> None:
		"""Apply CLI overrides from RunParams onto this config.

		Only non-None fields in run_params are applied, preserving
		environment-based defaults for anything the user didn't explicitly set.

		Parameters:
			run_params: Validated run parameters with optional overrides.

		Raises:
			ValueError: If the overrides leave the judge deadline at or
				below the council deadline.
		"""
		_OVERRIDES: list[tuple[str, str]] = [
		    ("timeout", "council_timeout_seconds"),
		    ("judge_timeout", "judge_timeout_seconds"),
		    ("judge_mode", "judge_mode"),
		]
		for param_field, config_field in _OVERRIDES:
			value = getattr(run_params, param_field)
			if value is not None:
				setattr(self, config_field, value)
		if self.judge_timeout_seconds <= self.council_timeout_seconds:
			raise ValueError(
			    "judge timeout must be greater than the council timeout")


__all__ = ["Config", "JudgeMode", "load_env"]
