"""
LLM Council models.

This subpackage contains Pydantic models for configuration, run state,
session handles, judge results and the events streamed during a run.

Key models:
	- Config: Application configuration loaded from environment
	- RunParams: Validated submission parameters
	- RunState: Per-run state owned by the orchestrator
	- SessionHandle: Binding of an agent to a live channel
	- JudgeResult: Parsed (or raw fallback) judge verdict
"""

from .agent import Agent
from .config import Config, JudgeMode, load_env
from .judge_result import (
    CRITERIA,
    FALLBACK_SEPARATOR,
    JudgeResult,
    ModelScore,
)
from .evaluation import EvaluationPrompt
from .run_state import (
    AgentResult,
    AgentStatus,
    RunStage,
    RunState,
    SessionRole,
    TERMINAL_STATUSES,
)
from .session_handle import SessionHandle
from .run_params import RunParams
from .run_outcome import (
    EventCallback,
    EventKind,
    RunError,
    RunEvent,
    RunOutcome,
)

__all__ = [
    "Agent",
    "Config",
    "JudgeMode",
    "load_env",
    "CRITERIA",
    "FALLBACK_SEPARATOR",
    "JudgeResult",
    "ModelScore",
    "EvaluationPrompt",
    "AgentResult",
    "AgentStatus",
    "RunStage",
    "RunState",
    "SessionRole",
    "TERMINAL_STATUSES",
    "SessionHandle",
    "RunParams",
    "EventCallback",
    "EventKind",
    "RunError",
    "RunEvent",
    "RunOutcome",
]
