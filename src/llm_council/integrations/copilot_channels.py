"""
Copilot-backed channels and automation adapter.

Each channel is a Copilot session running the model behind one agent.
The provider implements channel discovery and lifecycle for the
orchestrator; the adapter implements the five automation capabilities on
top of the session's event stream.
"""

from __future__ import annotations

import asyncio
from typing import Any

from llm_council.core.registry import match_agent
from llm_council.models.config import Config
from llm_council.ui.streaming import (
    ResponseCollector,
    fetch_last_assistant_message,
)
from llm_council.utils.logging import get_logger
from llm_council.utils.protocols import CopilotClientProtocol, SessionProtocol

logger = get_logger(__name__)


class CopilotChannel:
	"""A Copilot session standing in for one agent's live instance."""

	def __init__(
	    self,
	    address: str,
	    session: SessionProtocol,
	    *,
	    model: str,
	    isolated: bool = False,
	) -> None:
		self.address = address
		self.session = session
		self.model = model
		self.isolated = isolated
		self.collector = ResponseCollector(address)
		self.prepared = False

	def __repr__(self) -> str:
		return (f"CopilotChannel(address={self.address!r}, "
		        f"model={self.model!r}, isolated={self.isolated})")


class CopilotAdapter:
	"""
	Automation adapter for a Copilot channel.

	`set_text` buffers the prompt, `submit` sends it without waiting, and
	completion is reported once the session goes idle.
	"""

	def __init__(self, channel: CopilotChannel) -> None:
		self.channel = channel
		self._pending: str | None = None

	async def locate_input_surface(self) -> Any | None:
		return self.channel if self.channel.session is not None else None

	async def set_text(self, surface: Any, text: str) -> None:
		self._pending = text

	async def submit(self, surface: Any) -> bool:
		if not self._pending:
			return False
		collector = self.channel.collector
		collector.reset()
		await self.channel.session.send({"prompt": self._pending})
		self._pending = None
		return True

	async def is_generation_complete(self) -> bool:
		return self.channel.collector.idle

	async def read_latest_response_text(self) -> str:
		collector = self.channel.collector
		if collector.has_response:
			return collector.text
		return await fetch_last_assistant_message(self.channel.session) or ""


class CopilotChannelProvider:
	"""
	Channel provider backed by a started Copilot client.

	Parameters:
		client: Started Copilot client.
		config: Application configuration (fallback model).
	"""

	def __init__(self, client: CopilotClientProtocol, config: Config) -> None:
		self.client = client
		self.config = config
		self._channels: list[CopilotChannel] = []

	async def list_channels(self) -> list[CopilotChannel]:
		# isolated channels are invisible to discovery
		return [c for c in self._channels if not c.isolated]

	async def open_channel(self, address: str, *,
	                       isolated: bool = False) -> CopilotChannel:
		agent = match_agent(address)
		model = (agent.model if agent and agent.model else self.config.model)
		session = await self.client.create_session({
		    "model": model,
		    "streaming": True,
		})
		channel = CopilotChannel(address,
		                         session,
		                         model=model,
		                         isolated=isolated)
		self._channels.append(channel)
		logger.debug("opened %r", channel)
		return channel

	async def wait_until_loaded(self, channel: CopilotChannel,
	                            timeout: float) -> None:
		await asyncio.wait_for(channel.session.get_messages(), timeout)

	async def prepare(self, channel: CopilotChannel) -> None:
		if channel.prepared:
			return
		channel.session.on(channel.collector.handler)
		channel.prepared = True

	async def close_channel(self, channel: CopilotChannel) -> None:
		if channel in self._channels:
			self._channels.remove(channel)
		await channel.session.destroy()

	def adapter_for(self, channel: CopilotChannel) -> CopilotAdapter:
		return CopilotAdapter(channel)

	async def aclose(self) -> None:
		"""Destroy every channel still open."""
		for channel in list(self._channels):
			try:
				await self.close_channel(channel)
			except Exception:
				logger.debug("failed to destroy %r", channel, exc_info=True)


__all__ = ["CopilotAdapter", "CopilotChannel", "CopilotChannelProvider"]
