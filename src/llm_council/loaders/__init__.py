"""File and resource loading utilities.

This subpackage handles loading prompt templates and persisted
preferences used throughout the application.

Key modules:
	- prompts: Prompt template loading
	- preferences: YAML preferences persistence
"""

from .prompts import load_judge_template, load_prompt
from .preferences import Preferences, load_preferences, save_preferences

__all__ = [
    "load_judge_template",
    "load_prompt",
    "Preferences",
    "load_preferences",
    "save_preferences",
]
