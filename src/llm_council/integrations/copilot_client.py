"""
Copilot client factory module.

Provides factory functions for creating configured CopilotClient instances
based on runtime configuration (external server mode vs native stdio mode),
and a context manager yielding a channel provider bound to a started client.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from copilot import CopilotClient

from llm_council.integrations.copilot_channels import CopilotChannelProvider
from llm_council.models.config import Config
from llm_council.utils.logging import get_logger

logger = get_logger(__name__)


def create_client(config: Config) -> CopilotClient:
	"""Factory for CopilotClient with configured connection mode."""
	if config.cli_url:
		# External server mode
		return CopilotClient({
		    "cli_url": config.cli_url,
		    "log_level": config.log_level,
		})

	# Native stdio mode
	opts: dict[str, Any] = {"log_level": config.log_level}
	if config.github_token:
		opts["github_token"] = config.github_token
	return CopilotClient(opts)


@asynccontextmanager
async def open_provider(
    config: Config,
    client: Any | None = None,
) -> AsyncIterator[CopilotChannelProvider]:
	"""
	Start a Copilot client and yield a channel provider on top of it.

	Channels still open on exit are destroyed before the client stops.

	Parameters:
		config: Application configuration.
		client: Optional pre-built client (tests).

	Yields:
		CopilotChannelProvider bound to the started client.
	"""
	client = client or create_client(config)
	await client.start()
	provider = CopilotChannelProvider(client, config)
	try:
		yield provider
	finally:
		await provider.aclose()
		try:
			await client.stop()
		except Exception:
			logger.debug("failed to stop copilot client", exc_info=True)


__all__ = ["create_client", "open_provider"]
