"""
Completion polling.

Polls adapters on a fixed interval until generation finishes or a
deadline elapses. A poll that raises counts as "not yet complete"; only
the deadline ends the wait. The council-wide variant polls every waiting
agent concurrently against one shared deadline and reports each agent as
soon as it finishes.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import AsyncIterator, Mapping

from llm_council.core.errors import AgentTimeout
from llm_council.utils.logging import get_logger
from llm_council.utils.protocols import AdapterProtocol

logger = get_logger(__name__)


@dataclass(frozen=True)
class PollResult:
	"""Snapshot of one completion check."""

	complete: bool
	text: str = ""


async def poll(adapter: AdapterProtocol, *, timeout: float) -> PollResult:
	"""
	Ask an adapter once whether generation has finished.

	Text is only read after completion is reported, so a response still
	being generated is never returned as final. Never raises.

	Parameters:
		adapter: Automation adapter to query.
		timeout: Upper bound for the whole check.

	Returns:
		PollResult; incomplete on any error.
	"""

	async def _check() -> PollResult:
		if not await adapter.is_generation_complete():
			return PollResult(False)
		return PollResult(True, await adapter.read_latest_response_text()
		                  or "")

	try:
		return await asyncio.wait_for(_check(), timeout)
	except asyncio.CancelledError:
		raise
	except Exception as exc:
		logger.debug("poll failed, treating as incomplete: %r", exc)
		return PollResult(False)


async def await_completion(
    adapter: AdapterProtocol,
    timeout: float,
    *,
    interval: float,
    call_timeout: float,
    label: str = "agent",
    deadline: float | None = None,
) -> str:
	"""
	Poll until the adapter reports completion with non-empty text.

	Parameters:
		adapter: Automation adapter to poll.
		timeout: Seconds to wait when no deadline is given.
		interval: Sleep between polls.
		call_timeout: Upper bound for a single poll.
		label: Agent label used in errors and logs.
		deadline: Absolute event-loop time shared with other pollers.

	Returns:
		The final response text.

	Raises:
		AgentTimeout: If the deadline elapses first.
	"""
	loop = asyncio.get_running_loop()
	if deadline is None:
		deadline = loop.time() + timeout
	while True:
		remaining = deadline - loop.time()
		if remaining <= 0:
			raise AgentTimeout(label, timeout)
		result = await poll(adapter, timeout=min(call_timeout, remaining))
		if result.complete and result.text.strip():
			return result.text
		remaining = deadline - loop.time()
		if remaining <= 0:
			raise AgentTimeout(label, timeout)
		await asyncio.sleep(min(interval, remaining))


async def await_council(
    adapters: Mapping[str, AdapterProtocol],
    timeout: float,
    *,
    interval: float,
    call_timeout: float,
) -> AsyncIterator[tuple[str, str | None]]:
	"""
	Poll several adapters concurrently against one shared deadline.

	Yields (key, text) as each agent completes, first finished first, and
	(key, None) for every agent still pending when the deadline elapses.
	Pending poll tasks are cancelled when the caller stops iterating.

	Parameters:
		adapters: Adapters keyed by result-record key.
		timeout: Shared deadline in seconds.
		interval: Sleep between polls.
		call_timeout: Upper bound for a single poll.

	Yields:
		(key, text or None) pairs.
	"""
	if not adapters:
		return
	deadline = asyncio.get_running_loop().time() + timeout

	async def _one(key: str,
	               adapter: AdapterProtocol) -> tuple[str, str | None]:
		try:
			return key, await await_completion(adapter,
			                                   timeout,
			                                   interval=interval,
			                                   call_timeout=call_timeout,
			                                   label=key,
			                                   deadline=deadline)
		except AgentTimeout:
			return key, None

	tasks = [
	    asyncio.create_task(_one(key, adapter), name=f"poll:{key}")
	    for key, adapter in adapters.items()
	]
	try:
		for finished in asyncio.as_completed(tasks):
			yield await finished
	finally:
		for task in tasks:
			if not task.done():
				task.cancel()
		await asyncio.gather(*tasks, return_exceptions=True)


__all__ = ["PollResult", "await_completion", "await_council", "poll"]
