"""
Channel discovery for session handles.

Binds a logical agent to a reachable channel before any traffic is sent.
Existing channels are matched by address; otherwise a channel is opened
at the agent's canonical address, given time to load and settle, and
discovery is retried after a delay before the agent is given up on.
"""

from __future__ import annotations

import asyncio
from typing import Any

from llm_council.core.errors import DiscoveryFailure
from llm_council.core.registry import address_matches, get_agent
from llm_council.core.session import bounded
from llm_council.models.agent import Agent
from llm_council.models.config import Config
from llm_council.models.session_handle import SessionHandle
from llm_council.utils.logging import get_logger
from llm_council.utils.protocols import ChannelProviderProtocol

logger = get_logger(__name__)


async def find_channel(provider: ChannelProviderProtocol,
                       agent: Agent) -> Any | None:
	"""Return the first observable channel whose address matches agent."""
	for channel in await provider.list_channels():
		if address_matches(agent, getattr(channel, "address", None)):
			return channel
	return None


async def discover(
    handle: SessionHandle,
    provider: ChannelProviderProtocol,
    config: Config,
    *,
    fresh: bool = False,
    isolated: bool = False,
) -> SessionHandle:
	"""
	Bind a channel to the handle.

	Idempotent: a handle that is already bound is returned unchanged.
	A channel opened here is marked on the handle so teardown closes it.

	Parameters:
		handle: Session handle to bind.
		provider: Channel provider.
		config: Application configuration (timeouts and retry schedule).
		fresh: Always open a new channel instead of matching existing ones.
		isolated: Open new channels isolated from existing ones.

	Returns:
		The bound handle.

	Raises:
		DiscoveryFailure: If no channel is bound after all attempts; the
			handle's liveness flag is set to failed.
	"""
	if handle.channel is not None:
		return handle

	agent = get_agent(handle.agent_id)
	opened: Any | None = None
	reason = "no matching channel"
	for attempt in range(1, config.discovery_attempts + 1):
		try:
			channel = opened
			if channel is None and not fresh:
				channel = await bounded(find_channel(provider, agent),
				                        config.load_timeout_seconds,
				                        f"{handle.key} discovery")
			if channel is None:
				channel = opened = await bounded(
				    provider.open_channel(agent.url, isolated=isolated),
				    config.load_timeout_seconds,
				    f"opening {agent.url}",
				)
			if channel is opened:
				await bounded(
				    provider.wait_until_loaded(channel,
				                               config.load_timeout_seconds),
				    config.load_timeout_seconds,
				    f"loading {agent.url}",
				)
				# client-side initialization after the load signal
				await asyncio.sleep(config.settle_seconds)
			handle.bind(channel)
			handle.opened = channel is opened
			logger.info("discovered channel for %s at %s", handle.key,
			            getattr(channel, "address", "?"))
			return handle
		except Exception as exc:
			reason = str(exc) or type(exc).__name__
			logger.warning("discovery attempt %d/%d for %s failed: %s",
			               attempt, config.discovery_attempts, handle.key,
			               reason)
		if attempt < config.discovery_attempts:
			await asyncio.sleep(config.discovery_retry_delay_seconds)

	if opened is not None:
		try:
			await bounded(provider.close_channel(opened),
			              config.load_timeout_seconds,
			              f"closing {agent.url}")
		except Exception:
			logger.debug("failed to close unusable channel for %s",
			             handle.key,
			             exc_info=True)
	handle.mark_failed(reason)
	raise DiscoveryFailure(handle.agent_id, reason)


__all__ = ["discover", "find_channel"]
