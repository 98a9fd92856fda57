"""
Run parameters model.

Defines validated submission parameters for the CLI and orchestrator:
the prompt, the council selection, the judge and optional overrides.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_core.core_schema import ValidationInfo

from .config import JudgeMode


class RunParams(BaseModel):
	"""Validated parameters for one council run.

	Validation happens at construction, so an invalid submission is
	rejected before any channel is touched.
	"""

	prompt: str = Field(description="Prompt broadcast to the council")
	council: list[str] = Field(description="Council agent ids, in order")
	judge: str = Field(description="Judge agent id")
	exclude_judge: bool = Field(
	    default=False,
	    description="Drop the judge from the council before validation",
	)
	judge_mode: Optional[JudgeMode] = Field(default=None,
	                                        description="Judge isolation")
	timeout: Optional[float] = Field(default=None,
	                                 description="Council timeout")
	judge_timeout: Optional[float] = Field(default=None,
	                                       description="Judge timeout")

	@field_validator("prompt")
	@classmethod
	def validate_prompt(cls, v: str) -> str:
		v = v.strip()
		if not v:
			raise ValueError("prompt must not be empty")
		return v

	@field_validator("council", mode="before")
	@classmethod
	def split_council(cls, v):
		"""Accept comma-separated strings and drop duplicates, keeping order."""
		if isinstance(v, str):
			v = [p for p in v.split(",")]
		seen: list[str] = []
		for agent_id in v or []:
			agent_id = str(agent_id).strip().lower()
			if agent_id and agent_id not in seen:
				seen.append(agent_id)
		return seen

	@field_validator("judge")
	@classmethod
	def validate_judge(cls, v: str) -> str:
		from llm_council.core.registry import AGENTS

		v = v.strip().lower()
		if v not in AGENTS:
			raise ValueError(f"unknown judge agent: {v}")
		return v

	@field_validator("timeout", "judge_timeout")
	@classmethod
	def validate_positive(cls, v: Optional[float],
	                      info: ValidationInfo) -> Optional[float]:
		if v is None:
			return v
		if v <= 0:
			raise ValueError(f"{info.field_name} must be > 0")
		return v

	@model_validator(mode="after")
	def validate_council(self) -> "RunParams":
		from llm_council.core.registry import AGENTS, MAX_COUNCIL, MIN_COUNCIL

		unknown = [a for a in self.council if a not in AGENTS]
		if unknown:
			raise ValueError(f"unknown council agents: {', '.join(unknown)}")
		if self.exclude_judge and self.judge in self.council:
			self.council = [a for a in self.council if a != self.judge]
			if len(self.council) < MIN_COUNCIL:
				raise ValueError(
				    "judge overlaps with the council, pick a different judge")
		if not MIN_COUNCIL <= len(self.council) <= MAX_COUNCIL:
			raise ValueError(
			    f"council needs {MIN_COUNCIL}-{MAX_COUNCIL} agents, "
			    f"got {len(self.council)}")
		return self


__all__ = ["RunParams"]
