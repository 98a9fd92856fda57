"""
Prompt delivery into a bound channel.

Each attempt re-establishes automation on the channel, waits for it to
initialize, then asks the adapter to place the text and submit it. Failed
attempts back off and retry until the configured attempt limit.
"""

from __future__ import annotations

import asyncio
from typing import Callable

from llm_council.core.errors import DeliveryError
from llm_council.core.session import bounded
from llm_council.models.config import Config
from llm_council.models.session_handle import SessionHandle
from llm_council.utils.logging import get_logger
from llm_council.utils.protocols import (AdapterProtocol,
                                         ChannelProviderProtocol)

logger = get_logger(__name__)

AttemptCallback = Callable[[int], None]


class _AttemptFailed(Exception):
	pass


async def _deliver_once(adapter: AdapterProtocol, text: str,
                        submit_delay: float) -> None:
	surface = await adapter.locate_input_surface()
	if surface is None:
		raise _AttemptFailed("input surface not found")
	await adapter.set_text(surface, text)
	await asyncio.sleep(submit_delay)
	if not await adapter.submit(surface):
		raise _AttemptFailed("submission not committed")


async def deliver(
    handle: SessionHandle,
    adapter: AdapterProtocol,
    provider: ChannelProviderProtocol,
    text: str,
    config: Config,
    *,
    on_attempt: AttemptCallback | None = None,
) -> int:
	"""
	Deliver text to the agent behind a bound handle.

	Parameters:
		handle: Bound session handle.
		adapter: Automation adapter for the handle's channel.
		provider: Channel provider, used to prepare the channel.
		text: Text to deliver.
		config: Application configuration (attempts and delays).
		on_attempt: Called with the attempt number before each attempt.

	Returns:
		The attempt number that succeeded.

	Raises:
		DeliveryError: If every attempt failed.
	"""
	attempts = config.delivery_attempts
	reason = "not attempted"
	for attempt in range(1, attempts + 1):
		if on_attempt:
			on_attempt(attempt)
		try:
			await bounded(provider.prepare(handle.channel),
			              config.load_timeout_seconds,
			              f"preparing {handle.key}")
		except Exception:
			# a channel that is already prepared may refuse a second setup
			logger.debug("prepare failed for %s", handle.key, exc_info=True)
		await asyncio.sleep(config.delivery_init_delay_seconds * attempt)
		try:
			await bounded(
			    _deliver_once(adapter, text, config.submit_delay_seconds),
			    config.delivery_timeout_seconds,
			    f"delivery to {handle.key}",
			)
			logger.info("delivered prompt to %s on attempt %d", handle.key,
			            attempt)
			return attempt
		except Exception as exc:
			reason = str(exc) or type(exc).__name__
			logger.warning("delivery attempt %d/%d to %s failed: %s",
			               attempt, attempts, handle.key, reason)
		if attempt < attempts:
			await asyncio.sleep(config.delivery_backoff_seconds)
	raise DeliveryError(handle.agent_id, reason, attempts)


__all__ = ["AttemptCallback", "deliver"]
