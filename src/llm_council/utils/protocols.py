"""
Protocol definitions for dependency injection.

Defines Protocol classes for the automation adapter capability contract,
the channel provider consumed by discovery and injection, and the
Copilot client and session interfaces, so that tests can substitute
in-memory implementations.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence


class ChannelProtocol(Protocol):
	"""A live, addressable agent instance."""

	address: str


class AdapterProtocol(Protocol):
	"""
	Capability contract for one agent kind on one live channel.

	The orchestrator only calls set_text then submit for delivery, and
	is_generation_complete / read_latest_response_text for polling.
	"""

	async def locate_input_surface(self) -> Any | None:
		"""Return a reference to the input surface, or None if absent."""
		...

	async def set_text(self, surface: Any, text: str) -> None:
		"""Place text where the agent's own submission path can see it."""
		...

	async def submit(self, surface: Any) -> bool:
		"""Trigger submission; return True if it was committed."""
		...

	async def is_generation_complete(self) -> bool:
		"""Return True once the agent has finished generating."""
		...

	async def read_latest_response_text(self) -> str:
		"""Return the text of the latest response."""
		...


class ChannelProviderProtocol(Protocol):
	"""
	Source of channels for discovery and automation.

	Implementations own the mechanics of opening, loading and closing
	channels; the pipeline never looks inside a channel.
	"""

	async def list_channels(self) -> Sequence[ChannelProtocol]:
		"""Return the channels currently observable."""
		...

	async def open_channel(self, address: str, *,
	                       isolated: bool = False) -> ChannelProtocol:
		"""Open a new channel at address."""
		...

	async def wait_until_loaded(self, channel: ChannelProtocol,
	                            timeout: float) -> None:
		"""Return once the channel signals it has loaded."""
		...

	async def prepare(self, channel: ChannelProtocol) -> None:
		"""(Re-)establish automation on the channel; may be a no-op."""
		...

	async def close_channel(self, channel: ChannelProtocol) -> None:
		"""Tear down a channel this process opened."""
		...

	def adapter_for(self, channel: ChannelProtocol) -> AdapterProtocol:
		"""Default adapter factory for channels of this provider."""
		...


class SessionProtocol(Protocol):
	"""
	Protocol for Copilot session interface.

	Defines the expected methods for interacting with a Copilot session.
	"""

	async def send(self, options: dict) -> Any:
		"""Send a prompt without waiting for the turn to finish."""
		...

	async def abort(self) -> Any:
		"""Abort the current session operation."""
		...

	async def destroy(self) -> Any:
		"""Destroy the session and release resources."""
		...

	def on(self, handler: Any) -> Any:
		"""Register an event handler."""
		...

	async def get_messages(self) -> Any:
		"""Get all messages from the session."""
		...


class CopilotClientProtocol(Protocol):
	"""
	Protocol for Copilot client interface.

	Defines the expected methods for managing a Copilot client.
	"""

	async def start(self) -> Any:
		"""Start the client connection."""
		...

	async def stop(self) -> Any:
		"""Stop the client connection."""
		...

	async def create_session(self, config: dict) -> SessionProtocol:
		"""Create a new session with the given configuration."""
		...


__all__ = [
    "AdapterProtocol",
    "ChannelProtocol",
    "ChannelProviderProtocol",
    "CopilotClientProtocol",
    "SessionProtocol",
]
