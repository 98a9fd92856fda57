"""
Run state models.

Defines the per-agent status lifecycle, the per-agent result record and
the RunState value owned by the orchestrator for one pipeline invocation.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field

from .config import JudgeMode
from .evaluation import EvaluationPrompt
from .judge_result import JudgeResult


class AgentStatus(str, Enum):
	"""
	Lifecycle states for one agent within a run.

	PENDING: Channel not yet discovered.
	READY: Channel discovered, nothing sent.
	INJECTING: A delivery attempt is in flight.
	WAITING: Prompt delivered, waiting for generation to finish.
	COMPLETE: A final response was read back.
	FAILED: Discovery or delivery gave up.
	TIMEOUT: The completion deadline elapsed.
	"""

	PENDING = "pending"
	READY = "ready"
	INJECTING = "injecting"
	WAITING = "waiting"
	COMPLETE = "complete"
	FAILED = "failed"
	TIMEOUT = "timeout"


TERMINAL_STATUSES = frozenset(
    {AgentStatus.COMPLETE, AgentStatus.FAILED, AgentStatus.TIMEOUT})

_TRANSITIONS: dict[AgentStatus, frozenset[AgentStatus]] = {
    AgentStatus.PENDING:
    frozenset({AgentStatus.READY, AgentStatus.FAILED}),
    AgentStatus.READY:
    frozenset({AgentStatus.INJECTING, AgentStatus.FAILED}),
    # retries re-enter INJECTING
    AgentStatus.INJECTING:
    frozenset({
        AgentStatus.INJECTING, AgentStatus.WAITING, AgentStatus.FAILED
    }),
    AgentStatus.WAITING:
    frozenset({
        AgentStatus.COMPLETE, AgentStatus.TIMEOUT, AgentStatus.FAILED
    }),
}


class SessionRole(str, Enum):
	"""Role an agent plays in a run."""

	COUNCIL = "council"
	JUDGE = "judge"


class RunStage(str, Enum):
	"""Macro stage of the pipeline, used to label terminal errors."""

	DISCOVERY = "discovery"
	DELIVERY = "delivery"
	COUNCIL = "council"
	JUDGE = "judge"
	DONE = "done"


class AgentResult(BaseModel):
	"""Per-agent result record for a run."""

	agent_id: str
	name: str
	role: SessionRole = SessionRole.COUNCIL
	status: AgentStatus = AgentStatus.PENDING
	response: str | None = None
	error: str | None = None
	attempts: int = 0
	updated_at: datetime = Field(
	    default_factory=lambda: datetime.now(timezone.utc))

	@property
	def key(self) -> str:
		"""Role-qualified key, unique within a run."""
		return f"{self.role.value}:{self.agent_id}"

	@property
	def is_terminal(self) -> bool:
		return self.status in TERMINAL_STATUSES

	def transition(
	    self,
	    status: AgentStatus,
	    *,
	    response: str | None = None,
	    error: str | None = None,
	) -> None:
		"""Move to a new status, enforcing forward-only progress.

		Parameters:
			status: Target status.
			response: Response text, recorded when completing.
			error: Failure reason, recorded when failing or timing out.

		Raises:
			ValueError: If the transition is not allowed.
		"""
		allowed = _TRANSITIONS.get(self.status, frozenset())
		if status not in allowed:
			raise ValueError(f"{self.key}: illegal transition "
			                 f"{self.status.value} -> {status.value}")
		self.status = status
		if status == AgentStatus.INJECTING:
			self.attempts += 1
		if response is not None:
			self.response = response
		if error is not None:
			self.error = error
		self.updated_at = datetime.now(timezone.utc)


class RunState(BaseModel):
	"""State for one pipeline invocation, owned by the orchestrator."""

	run_id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
	prompt: str
	council: list[str]
	judge_id: str
	judge_mode: JudgeMode = JudgeMode.INCOGNITO
	stage: RunStage = RunStage.DISCOVERY
	results: dict[str, AgentResult] = Field(default_factory=dict)
	judge: AgentResult
	evaluation: EvaluationPrompt | None = None
	judge_result: JudgeResult | None = None

	@classmethod
	def start(
	    cls,
	    prompt: str,
	    council: list[str],
	    judge_id: str,
	    names: dict[str, str],
	    judge_mode: JudgeMode = JudgeMode.INCOGNITO,
	) -> "RunState":
		"""Create a clean state with every council agent pending.

		Parameters:
			prompt: The user prompt broadcast to the council.
			council: Council agent ids in request order.
			judge_id: Judge agent id.
			names: Display names keyed by agent id.
			judge_mode: Judge isolation mode for this run.

		Returns:
			A fresh RunState.
		"""
		return cls(
		    prompt=prompt,
		    council=list(council),
		    judge_id=judge_id,
		    judge_mode=judge_mode,
		    results={
		        agent_id: AgentResult(agent_id=agent_id,
		                              name=names[agent_id])
		        for agent_id in council
		    },
		    judge=AgentResult(
		        agent_id=judge_id,
		        name=names[judge_id],
		        role=SessionRole.JUDGE,
		    ),
		)

	def ordered_results(self) -> list[AgentResult]:
		"""Council records in request order."""
		return [self.results[agent_id] for agent_id in self.council]

	def with_status(self, *statuses: AgentStatus) -> list[AgentResult]:
		return [r for r in self.ordered_results() if r.status in statuses]

	def completed(self) -> list[AgentResult]:
		"""Council records that produced a usable response."""
		return [
		    r for r in self.ordered_results()
		    if r.status == AgentStatus.COMPLETE and r.response
		]

	def unfinished(self) -> list[AgentResult]:
		records = self.ordered_results() + [self.judge]
		return [r for r in records if not r.is_terminal]


__all__ = [
    "AgentStatus",
    "AgentResult",
    "RunStage",
    "RunState",
    "SessionRole",
    "TERMINAL_STATUSES",
]
