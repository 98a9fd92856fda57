"""
Council pipeline errors.

Per-agent errors (discovery, delivery, timeout) are absorbed by the
orchestrator and recorded on the agent's result record. Only
AllCouncilFailed ends a run with an error; judge errors degrade to an
unparsed fallback result.
"""

from __future__ import annotations


class CouncilError(Exception):
	"""Base class for pipeline errors."""


class DiscoveryFailure(CouncilError):
	"""No channel could be bound for an agent after all retries."""

	def __init__(self, agent_id: str, reason: str) -> None:
		super().__init__(f"{agent_id}: no channel found ({reason})")
		self.agent_id = agent_id
		self.reason = reason


class DeliveryError(CouncilError):
	"""Every delivery attempt for an agent failed."""

	def __init__(self, agent_id: str, reason: str, attempts: int) -> None:
		super().__init__(
		    f"{agent_id}: delivery failed after {attempts} attempt(s): "
		    f"{reason}")
		self.agent_id = agent_id
		self.reason = reason
		self.attempts = attempts


class AgentTimeout(CouncilError, TimeoutError):
	"""The completion deadline elapsed before the agent finished."""

	def __init__(self, agent_id: str, timeout: float) -> None:
		super().__init__(f"{agent_id}: no response within {timeout:g}s")
		self.agent_id = agent_id
		self.timeout = timeout


class AllCouncilFailed(CouncilError):
	"""No council agent produced a usable response."""


class JudgeUnreachable(CouncilError):
	"""The judge channel could not be discovered or delivered to."""


class JudgeTimeout(CouncilError, TimeoutError):
	"""The judge did not finish before its deadline."""


__all__ = [
    "AgentTimeout",
    "AllCouncilFailed",
    "CouncilError",
    "DeliveryError",
    "DiscoveryFailure",
    "JudgeTimeout",
    "JudgeUnreachable",
]
