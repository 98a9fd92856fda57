"""
Streaming helpers for Copilot sessions.

Provides a `ResponseCollector` that handles session events for one
channel, accumulates message deltas and the final assistant message, and
records when the session goes idle. The Copilot-backed adapter reads
completion and response text from it.
"""

from __future__ import annotations

from typing import Any, List, Optional

from copilot.generated.session_events import SessionEventType

from llm_council.utils.logging import get_logger

logger = get_logger(__name__)


class ResponseCollector:
	"""Collect one turn's streamed response and idle signal."""

	def __init__(self, label: str) -> None:
		self.label = label
		self.chunks: List[str] = []
		self.message: Optional[str] = None
		self.error: Optional[str] = None
		self.idle = False

	def reset(self) -> None:
		"""Forget the previous turn before a new prompt is sent."""
		self.chunks = []
		self.message = None
		self.error = None
		self.idle = False

	def handler(self, event: Any) -> None:
		"""Handle a session event."""
		et = getattr(event, "type", None)
		data = getattr(event, "data", None)
		if et == SessionEventType.ASSISTANT_MESSAGE_DELTA:
			self.chunks.append(getattr(data, "delta_content", "") or "")
		elif et == SessionEventType.ASSISTANT_MESSAGE:
			content = getattr(data, "content", "") or ""
			# tool-call turns emit empty messages
			if content:
				self.message = content
		elif et == SessionEventType.SESSION_IDLE:
			self.idle = True
		elif et == SessionEventType.SESSION_ERROR:
			self.error = getattr(data, "message", None) or str(data)
			logger.warning("%s session error: %s", self.label, self.error)

	@property
	def text(self) -> str:
		"""Final assistant message, or the concatenated deltas."""
		return self.message or "".join(self.chunks)

	@property
	def has_response(self) -> bool:
		return bool(self.text.strip())


async def fetch_last_assistant_message(session: Any) -> Optional[str]:
	"""
	Fallback to retrieve the last assistant message from session messages.

	Parameters:
		session: The Copilot session object.

	Returns:
		Content of the last assistant message, or None.
	"""
	try:
		messages = await session.get_messages()
		for ev in reversed(messages):
			if getattr(ev, "type", None) == SessionEventType.ASSISTANT_MESSAGE:
				content = getattr(getattr(ev, "data", None), "content", None)
				if content:
					return content
	except Exception:
		logger.debug("failed to read session messages", exc_info=True)
		return None
	return None


__all__ = ["ResponseCollector", "fetch_last_assistant_message"]
