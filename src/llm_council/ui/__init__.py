"""User interface components.

This subpackage provides terminal UI and output rendering.

Key modules:
	- tui: Rich-based terminal UI for run progress
	- streaming: Response collection from Copilot session events
	- reporting: Plain-text result export
"""

from llm_council.ui.tui import TUI, AgentDisplayState
from llm_council.ui.streaming import (
    ResponseCollector,
    fetch_last_assistant_message,
)
from llm_council.ui.reporting import format_result_text, save_result_text

__all__ = [
    # tui
    "TUI",
    "AgentDisplayState",
    # streaming
    "ResponseCollector",
    "fetch_last_assistant_message",
    # reporting
    "format_result_text",
    "save_result_text",
]
