"""
Persisted user preferences.

Remembers the last council selection, judge and judge isolation mode in
a small YAML file so the CLI can offer them as defaults next time.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from llm_council.models.config import JudgeMode
from llm_council.utils.logging import get_logger

logger = get_logger(__name__)


class Preferences(BaseModel):
	"""Last-used selections; unknown keys are kept as-is."""

	model_config = ConfigDict(extra="allow")

	selected_council: Optional[list[str]] = None
	selected_judge: Optional[str] = None
	judge_isolation_mode: Optional[JudgeMode] = None
	last_prompt: Optional[str] = None


def load_preferences(path: str | Path) -> Preferences:
	"""
	Load preferences from a YAML file.

	A missing, unreadable or malformed file yields defaults.

	Parameters:
		path: Preferences file path.

	Returns:
		Preferences instance.
	"""
	p = Path(path).expanduser()
	if not p.exists():
		return Preferences()
	try:
		data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
		if not isinstance(data, dict):
			raise ValueError("preferences file is not a mapping")
		return Preferences(**data)
	except (OSError, yaml.YAMLError, ValueError, ValidationError) as exc:
		logger.warning("ignoring unreadable preferences %s: %s", p, exc)
		return Preferences()


def save_preferences(path: str | Path, prefs: Preferences) -> None:
	"""
	Write preferences to a YAML file, creating parent directories.

	An unwritable path is logged and otherwise ignored.

	Parameters:
		path: Preferences file path.
		prefs: Preferences to persist.
	"""
	p = Path(path).expanduser()
	data = prefs.model_dump(mode="json", exclude_none=True)
	try:
		p.parent.mkdir(parents=True, exist_ok=True)
		p.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
	except OSError as exc:
		logger.warning("could not save preferences to %s: %s", p, exc)


__all__ = ["Preferences", "load_preferences", "save_preferences"]
