"""
Session handle model.

A SessionHandle binds one agent, in one role, to a live channel for the
duration of a run.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from .run_state import SessionRole


class SessionHandle(BaseModel):
	"""Runtime binding of an agent to its communication channel."""

	agent_id: str
	role: SessionRole
	channel: Any | None = None
	failed: bool = False
	failure_reason: str | None = None
	# True when this handle opened the channel and must close it
	opened: bool = False

	@property
	def key(self) -> str:
		"""Role-qualified key; the same agent may hold both roles."""
		return f"{self.role.value}:{self.agent_id}"

	@property
	def bound(self) -> bool:
		return self.channel is not None and not self.failed

	def bind(self, channel: Any) -> Any:
		"""Attach a channel unless one is already bound.

		Parameters:
			channel: Channel discovered for this agent.

		Returns:
			The channel that is bound after the call.
		"""
		if self.channel is None:
			self.channel = channel
		return self.channel

	def mark_failed(self, reason: str) -> None:
		self.failed = True
		self.failure_reason = reason


__all__ = ["SessionHandle"]
