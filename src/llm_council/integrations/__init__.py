"""External service integrations.

This subpackage provides the Copilot SDK integration that backs council
channels.

Key modules:
	- copilot_client: Copilot client factory and provider lifecycle
	- copilot_channels: Copilot-backed channel provider and adapter
"""

from llm_council.integrations.copilot_channels import (
    CopilotAdapter,
    CopilotChannel,
    CopilotChannelProvider,
)
from llm_council.integrations.copilot_client import create_client, open_provider

__all__ = [
    # copilot_channels
    "CopilotAdapter",
    "CopilotChannel",
    "CopilotChannelProvider",
    # copilot_client
    "create_client",
    "open_provider",
]
