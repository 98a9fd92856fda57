"""Shared utility functions.

This subpackage provides common utility functions used across
the application with no dependencies on other subpackages.

Key modules:
	- parsing: Markdown section and name matching utilities
	- logging: Logging configuration
	- protocols: Protocol definitions for dependency injection
"""

from .parsing import (
    Section,
    find_section,
    match_known_name,
    normalize_heading,
    parse_sections,
    strip_emphasis,
)
from .logging import configure_logging, get_logger
from .protocols import (
    AdapterProtocol,
    ChannelProtocol,
    ChannelProviderProtocol,
    CopilotClientProtocol,
    SessionProtocol,
)

__all__ = [
    # parsing
    "Section",
    "find_section",
    "match_known_name",
    "normalize_heading",
    "parse_sections",
    "strip_emphasis",
    # logging
    "configure_logging",
    "get_logger",
    # protocols
    "AdapterProtocol",
    "ChannelProtocol",
    "ChannelProviderProtocol",
    "CopilotClientProtocol",
    "SessionProtocol",
]
