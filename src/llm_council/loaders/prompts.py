"""
Prompt loading utilities.

Provides functions for loading prompt templates from the prompts directory
or from a user-supplied file.
"""

from __future__ import annotations

from pathlib import Path

from llm_council.utils.logging import get_logger

logger = get_logger(__name__)

# Prompts directory relative to this module
PROMPTS_DIR = Path(__file__).resolve().parents[1] / "prompts"

CHAIRMAN_PROMPT = "chairman.md"


def load_prompt(name: str) -> str:
	"""
	Load a prompt file from the prompts directory.

	Parameters:
		name: Filename of the prompt to load.

	Returns:
		Contents of the prompt file.
	"""
	return (PROMPTS_DIR / name).read_text(encoding="utf-8")


def load_judge_template(path: str | Path | None = None) -> str:
	"""
	Load the chairman preamble template.

	A custom file wins when it exists; otherwise the packaged prompt is
	used. Supports absolute, cwd-relative and home-relative paths.

	Parameters:
		path: Optional custom template path.

	Returns:
		Template text with ${original_prompt}, ${failed_note} and
		${responses} placeholders.
	"""
	if path:
		p = Path(path).expanduser()
		if p.exists():
			return p.read_text(encoding="utf-8")
		logger.warning("judge prompt file %s not found, using default", p)
	return load_prompt(CHAIRMAN_PROMPT)


__all__ = ["CHAIRMAN_PROMPT", "PROMPTS_DIR", "load_judge_template",
           "load_prompt"]
