"""Copilot-backed provider and adapter against an in-memory client."""

from unittest.mock import MagicMock, patch

import pytest
from copilot.generated.session_events import SessionEventType

from llm_council.integrations.copilot_channels import (
    CopilotAdapter,
    CopilotChannelProvider,
)
from llm_council.integrations.copilot_client import (
    create_client,
    open_provider,
)
from llm_council.models.config import Config
from llm_council.ui.streaming import ResponseCollector


class DummyEvent:

	def __init__(self, type_, **data):
		self.type = type_
		self.data = type("D", (), data)


class DummySession:

	def __init__(self, options):
		self.options = options
		self.handlers = []
		self.sent = []
		self.history = []
		self.destroyed = False

	def on(self, handler):
		self.handlers.append(handler)
		return lambda: None

	async def send(self, options):
		self.sent.append(options)

	async def get_messages(self):
		return self.history

	async def destroy(self):
		self.destroyed = True

	def emit(self, event):
		for handler in self.handlers:
			handler(event)


class DummyClient:

	def __init__(self):
		self.sessions = []
		self.started = False
		self.stopped = False

	async def start(self):
		self.started = True

	async def stop(self):
		self.stopped = True

	async def create_session(self, options):
		session = DummySession(options)
		self.sessions.append(session)
		return session


@pytest.fixture
def provider(config):
	return CopilotChannelProvider(DummyClient(), config)


@pytest.mark.asyncio
async def test_open_channel_uses_agent_model(provider):
	chatgpt = await provider.open_channel("https://chatgpt.com/")
	perplexity = await provider.open_channel("https://www.perplexity.ai/")
	assert chatgpt.session.options == {"model": "gpt-5", "streaming": True}
	assert perplexity.model == provider.config.model


@pytest.mark.asyncio
async def test_isolated_channels_are_not_listed(provider):
	shared = await provider.open_channel("https://grok.com/")
	await provider.open_channel("https://grok.com/", isolated=True)
	assert await provider.list_channels() == [shared]


@pytest.mark.asyncio
async def test_prepare_attaches_handler_once(provider):
	channel = await provider.open_channel("https://grok.com/")
	await provider.prepare(channel)
	await provider.prepare(channel)
	assert len(channel.session.handlers) == 1


@pytest.mark.asyncio
async def test_adapter_round_trip(provider):
	channel = await provider.open_channel("https://grok.com/")
	await provider.wait_until_loaded(channel, 1)
	await provider.prepare(channel)
	adapter = provider.adapter_for(channel)
	assert isinstance(adapter, CopilotAdapter)

	surface = await adapter.locate_input_surface()
	assert await adapter.submit(surface) is False
	await adapter.set_text(surface, "What is 2+2?")
	assert await adapter.submit(surface) is True
	assert channel.session.sent == [{"prompt": "What is 2+2?"}]
	assert await adapter.is_generation_complete() is False

	session = channel.session
	session.emit(
	    DummyEvent(SessionEventType.ASSISTANT_MESSAGE_DELTA,
	               delta_content="It is "))
	session.emit(
	    DummyEvent(SessionEventType.ASSISTANT_MESSAGE_DELTA,
	               delta_content="4."))
	assert await adapter.is_generation_complete() is False
	session.emit(DummyEvent(SessionEventType.SESSION_IDLE))
	assert await adapter.is_generation_complete() is True
	assert await adapter.read_latest_response_text() == "It is 4."


@pytest.mark.asyncio
async def test_new_prompt_forgets_previous_turn(provider):
	channel = await provider.open_channel("https://grok.com/")
	await provider.prepare(channel)
	adapter = provider.adapter_for(channel)
	await adapter.set_text(channel, "one")
	await adapter.submit(channel)
	channel.session.emit(
	    DummyEvent(SessionEventType.ASSISTANT_MESSAGE, content="first"))
	channel.session.emit(DummyEvent(SessionEventType.SESSION_IDLE))

	await adapter.set_text(channel, "two")
	await adapter.submit(channel)
	assert await adapter.is_generation_complete() is False
	assert channel.collector.text == ""


@pytest.mark.asyncio
async def test_read_falls_back_to_session_history(provider):
	channel = await provider.open_channel("https://grok.com/")
	channel.session.history = [
	    DummyEvent(SessionEventType.ASSISTANT_MESSAGE, content="older"),
	    DummyEvent(SessionEventType.ASSISTANT_MESSAGE, content="latest"),
	]
	adapter = provider.adapter_for(channel)
	assert await adapter.read_latest_response_text() == "latest"


def test_collector_keeps_final_message_over_deltas():
	collector = ResponseCollector("grok")
	collector.handler(
	    DummyEvent(SessionEventType.ASSISTANT_MESSAGE_DELTA,
	               delta_content="partial"))
	collector.handler(
	    DummyEvent(SessionEventType.ASSISTANT_MESSAGE, content="complete"))
	# tool-call turns end with an empty message
	collector.handler(DummyEvent(SessionEventType.ASSISTANT_MESSAGE,
	                             content=""))
	assert collector.text == "complete"
	assert collector.has_response


def test_collector_records_session_errors():
	collector = ResponseCollector("grok")
	collector.handler(
	    DummyEvent(SessionEventType.SESSION_ERROR, message="rate limited"))
	assert collector.error == "rate limited"
	assert not collector.has_response


@pytest.mark.asyncio
async def test_close_and_aclose_destroy_sessions(provider):
	first = await provider.open_channel("https://grok.com/")
	second = await provider.open_channel("https://chatgpt.com/")
	await provider.close_channel(first)
	assert first.session.destroyed
	assert await provider.list_channels() == [second]
	await provider.aclose()
	assert second.session.destroyed
	assert await provider.list_channels() == []


@pytest.mark.asyncio
async def test_open_provider_manages_client(config):
	client = DummyClient()
	async with open_provider(config, client) as provider:
		assert client.started
		channel = await provider.open_channel("https://grok.com/")
	assert channel.session.destroyed
	assert client.stopped


class TestCreateClient:
	"""Tests for create_client factory function."""

	@patch("llm_council.integrations.copilot_client.CopilotClient")
	def test_external_server_mode(self, mock_client_class: MagicMock):
		cfg = Config(COPILOT_CLI_URL="localhost:8080", LOG_LEVEL="debug")
		create_client(cfg)
		mock_client_class.assert_called_once_with({
		    "cli_url": "localhost:8080",
		    "log_level": "debug",
		})

	@patch("llm_council.integrations.copilot_client.CopilotClient")
	def test_native_stdio_mode_with_token(self,
	                                      mock_client_class: MagicMock):
		cfg = Config(GITHUB_TOKEN="ghp_test123", LOG_LEVEL="warning")
		create_client(cfg)
		mock_client_class.assert_called_once_with({
		    "log_level": "warning",
		    "github_token": "ghp_test123",
		})
