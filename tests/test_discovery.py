import pytest

from llm_council.core.discovery import discover, find_channel
from llm_council.core.errors import DiscoveryFailure
from llm_council.core.registry import get_agent
from llm_council.models.run_state import SessionRole
from llm_council.models.session_handle import SessionHandle

from fakes import ScriptedProvider


def _handle(agent_id="chatgpt", role=SessionRole.COUNCIL):
	return SessionHandle(agent_id=agent_id, role=role)


@pytest.mark.asyncio
async def test_find_channel_matches_existing():
	provider = ScriptedProvider(existing=("https://example.com/",
	                                      "https://chat.openai.com/c/1"))
	channel = await find_channel(provider, get_agent("chatgpt"))
	assert channel.address == "https://chat.openai.com/c/1"


@pytest.mark.asyncio
async def test_discover_reuses_existing_channel(config):
	provider = ScriptedProvider(existing=("https://chatgpt.com/c/1", ))
	handle = await discover(_handle(), provider, config)
	assert handle.channel.address == "https://chatgpt.com/c/1"
	assert handle.opened is False
	assert provider.opened == []


@pytest.mark.asyncio
async def test_discover_opens_missing_channel(config):
	provider = ScriptedProvider()
	handle = await discover(_handle("gemini"), provider, config)
	assert handle.opened is True
	assert provider.opened == [handle.channel]
	assert handle.channel.address == "https://gemini.google.com/app"


@pytest.mark.asyncio
async def test_discover_is_idempotent(config):
	provider = ScriptedProvider()
	handle = await discover(_handle(), provider, config)
	channel = handle.channel
	await discover(handle, provider, config)
	assert handle.channel is channel
	assert len(provider.opened) == 1


@pytest.mark.asyncio
async def test_discover_fresh_isolated_ignores_existing(config):
	provider = ScriptedProvider(existing=("https://grok.com/", ))
	handle = await discover(_handle("grok", SessionRole.JUDGE),
	                        provider,
	                        config,
	                        fresh=True,
	                        isolated=True)
	assert handle.channel.isolated is True
	assert handle.opened is True


@pytest.mark.asyncio
async def test_discover_failure_marks_handle(config):
	provider = ScriptedProvider(unreachable=("perplexity", ))
	handle = _handle("perplexity")
	with pytest.raises(DiscoveryFailure, match="perplexity"):
		await discover(handle, provider, config)
	assert handle.failed is True
	assert "cannot open" in handle.failure_reason
	assert handle.channel is None


@pytest.mark.asyncio
async def test_discover_closes_channel_that_never_loaded(config):
	provider = ScriptedProvider(load_fails=("grok", ))
	handle = _handle("grok")
	with pytest.raises(DiscoveryFailure):
		await discover(handle, provider, config)
	# the opened channel is retried, not re-opened, then closed
	assert len(provider.opened) == 1
	assert provider.closed == provider.opened
