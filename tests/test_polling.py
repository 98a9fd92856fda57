import asyncio

import pytest

from llm_council.core.errors import AgentTimeout
from llm_council.core.polling import (
    PollResult,
    await_completion,
    await_council,
    poll,
)

from fakes import ScriptedAdapter


class _MidGeneration(ScriptedAdapter):
	"""Reports partial text until generation finishes."""

	async def read_latest_response_text(self):
		return "partial" if self.polls < self.polls_until_done else "final"


@pytest.mark.asyncio
async def test_poll_reads_text_only_when_complete():
	adapter = ScriptedAdapter("done", polls_until_done=2)
	adapter.sent.append("q")
	assert await poll(adapter, timeout=1) == PollResult(False, "")
	assert await poll(adapter, timeout=1) == PollResult(True, "done")


@pytest.mark.asyncio
async def test_poll_errors_count_as_incomplete():
	adapter = ScriptedAdapter("x", poll_error=True)
	adapter.sent.append("q")
	assert await poll(adapter, timeout=1) == PollResult(False)


@pytest.mark.asyncio
async def test_await_completion_returns_final_text():
	adapter = _MidGeneration(polls_until_done=3)
	adapter.sent.append("q")
	text = await await_completion(adapter,
	                              1.0,
	                              interval=0.01,
	                              call_timeout=0.5)
	assert text == "final"


@pytest.mark.asyncio
async def test_await_completion_ignores_empty_text():
	adapter = ScriptedAdapter("   ")
	adapter.sent.append("q")
	with pytest.raises(AgentTimeout):
		await await_completion(adapter, 0.1, interval=0.01, call_timeout=0.05)


@pytest.mark.asyncio
async def test_await_completion_keeps_polling_through_errors():
	adapter = ScriptedAdapter("ok", poll_error=True)
	adapter.sent.append("q")

	async def recover():
		await asyncio.sleep(0.05)
		adapter.poll_error = False

	asyncio.get_running_loop().create_task(recover())
	text = await await_completion(adapter,
	                              1.0,
	                              interval=0.01,
	                              call_timeout=0.5,
	                              label="council:grok")
	assert text == "ok"


@pytest.mark.asyncio
async def test_await_completion_timeout_names_agent():
	adapter = ScriptedAdapter("x", never_completes=True)
	with pytest.raises(AgentTimeout, match="council:grok") as exc_info:
		await await_completion(adapter,
		                       0.05,
		                       interval=0.01,
		                       call_timeout=0.05,
		                       label="council:grok")
	assert isinstance(exc_info.value, TimeoutError)


@pytest.mark.asyncio
async def test_await_council_reports_first_finished_first():
	slow = ScriptedAdapter("slow", polls_until_done=20)
	fast = ScriptedAdapter("fast", polls_until_done=1)
	stuck = ScriptedAdapter("never", never_completes=True)
	for a in (slow, fast, stuck):
		a.sent.append("q")
	seen = []
	async for key, text in await_council(
	    {
	        "council:slow": slow,
	        "council:fast": fast,
	        "council:stuck": stuck
	    },
	        0.5,
	        interval=0.005,
	        call_timeout=0.1,
	):
		seen.append((key, text))
	assert seen[0] == ("council:fast", "fast")
	assert seen[1] == ("council:slow", "slow")
	assert seen[2] == ("council:stuck", None)


@pytest.mark.asyncio
async def test_await_council_empty():
	seen = [item async for item in await_council({}, 1, interval=0.01,
	                                             call_timeout=0.1)]
	assert seen == []
