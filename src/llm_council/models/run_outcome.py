"""
Run events and outcome models.

Defines the events streamed to the caller while a run progresses and the
aggregate outcome returned when it ends.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Callable

from pydantic import BaseModel, Field

from .judge_result import JudgeResult
from .run_state import AgentResult, AgentStatus


class EventKind(str, Enum):
	"""
	Kinds of run events.

	STATUS: A per-agent status transition.
	PROGRESS: Free-text progress message.
	RESULT: Terminal event carrying the judge result.
	ERROR: Terminal event carrying a run error.
	"""

	STATUS = "status"
	PROGRESS = "progress"
	RESULT = "result"
	ERROR = "error"


class RunError(BaseModel):
	"""Whole-run failure naming the stage that failed."""

	stage: str
	kind: str
	message: str


class RunEvent(BaseModel):
	"""One event emitted by the orchestrator."""

	run_id: str
	kind: EventKind
	message: str = ""
	agent_key: str | None = None
	status: AgentStatus | None = None
	result: JudgeResult | None = None
	error: RunError | None = None
	at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

	@property
	def terminal(self) -> bool:
		return self.kind in (EventKind.RESULT, EventKind.ERROR)


EventCallback = Callable[[RunEvent], None]


class RunOutcome(BaseModel):
	"""
	Aggregate outcome of a council run.

	Exactly one of judge_result and error is set.
	"""

	run_id: str
	results: list[AgentResult] = Field(default_factory=list)
	judge: AgentResult | None = None
	judge_result: JudgeResult | None = None
	error: RunError | None = None
	cancelled: bool = False

	@property
	def ok(self) -> bool:
		return self.error is None and self.judge_result is not None


__all__ = [
    "EventCallback",
    "EventKind",
    "RunError",
    "RunEvent",
    "RunOutcome",
]
