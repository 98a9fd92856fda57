"""
Shared channel utilities for discovery, injection and teardown.

Provides the time-bounding helper used around every external call and
safe channel teardown that never raises.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

from llm_council.models.session_handle import SessionHandle
from llm_council.utils.logging import get_logger
from llm_council.utils.protocols import ChannelProviderProtocol

logger = get_logger(__name__)

T = TypeVar("T")


async def bounded(awaitable: Awaitable[T], timeout: float, what: str) -> T:
	"""Await an external call, failing with TimeoutError after timeout.

	Parameters:
		awaitable: The external call.
		timeout: Upper bound in seconds.
		what: Short description used in the error message.

	Returns:
		The awaited value.

	Raises:
		TimeoutError: If the call does not finish in time.
	"""
	try:
		return await asyncio.wait_for(awaitable, timeout)
	except asyncio.TimeoutError:
		raise TimeoutError(f"{what} timed out after {timeout:g}s") from None


async def close_channel_safe(
    provider: ChannelProviderProtocol,
    handle: SessionHandle | None,
    timeout: float,
) -> None:
	"""Close a channel the handle opened, logging but not raising on failure.

	Channels that were merely discovered (already open before the run)
	are left alone.

	Parameters:
		provider: Channel provider that owns the channel.
		handle: Handle whose channel should be closed, or None.
		timeout: Upper bound for the close call.
	"""
	if not handle or not handle.opened or handle.channel is None:
		return
	channel = handle.channel
	handle.channel = None
	handle.opened = False
	try:
		await bounded(provider.close_channel(channel), timeout,
		              f"closing {handle.key}")
	except Exception:
		logger.debug("failed to close %s channel", handle.key, exc_info=True)


__all__ = ["bounded", "close_channel_safe"]
