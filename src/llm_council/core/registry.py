"""
Agent and adapter registries.

Holds the built-in agent definitions, address matching used by channel
discovery, and the registry that selects an automation adapter per agent.
"""

from __future__ import annotations

from typing import Any, Callable
from urllib.parse import urlparse

from llm_council.models.agent import Agent
from llm_council.utils.protocols import AdapterProtocol

MIN_COUNCIL = 2
MAX_COUNCIL = 4

AGENTS: dict[str, Agent] = {
    agent.id: agent
    for agent in (
        Agent(
            id="chatgpt",
            name="ChatGPT",
            url="https://chatgpt.com/",
            match_patterns=("chatgpt.com", "chat.openai.com"),
            model="gpt-5",
        ),
        Agent(
            id="gemini",
            name="Gemini",
            url="https://gemini.google.com/app",
            match_patterns=("gemini.google.com", ),
            model="gemini-2.5-pro",
        ),
        Agent(
            id="perplexity",
            name="Perplexity",
            url="https://www.perplexity.ai/",
            match_patterns=("perplexity.ai", ),
        ),
        Agent(
            id="grok",
            name="Grok",
            url="https://grok.com/",
            match_patterns=("grok.com", "x.com/i/grok"),
            model="grok-code-fast-1",
        ),
    )
}

AdapterFactory = Callable[[Any], AdapterProtocol]


def get_agent(agent_id: str) -> Agent:
	"""Return the agent definition for an id.

	Raises:
		ValueError: If the id is unknown.
	"""
	try:
		return AGENTS[agent_id]
	except KeyError:
		raise ValueError(f"unknown agent: {agent_id}") from None


def display_names() -> dict[str, str]:
	return {agent_id: agent.name for agent_id, agent in AGENTS.items()}


def _host(address: str) -> str:
	parsed = urlparse(address if "://" in address else f"https://{address}")
	return (parsed.hostname or "").lower()


def address_matches(agent: Agent, address: str | None) -> bool:
	"""
	Decide whether an observed address belongs to an agent.

	Configured patterns are tried first; otherwise the address matches
	when it is on the same host as the agent's canonical address or on
	a subdomain of it (or vice versa).

	Parameters:
		agent: Agent definition.
		address: Observed channel address.

	Returns:
		True if the address belongs to the agent.
	"""
	if not address:
		return False
	lowered = address.lower()
	if any(pattern.lower() in lowered for pattern in agent.match_patterns):
		return True
	observed = _host(address)
	canonical = _host(agent.url)
	# bare TLDs would otherwise match every host
	if "." not in observed or "." not in canonical:
		return False
	return (observed == canonical or observed.endswith(f".{canonical}")
	        or canonical.endswith(f".{observed}"))


def match_agent(address: str | None) -> Agent | None:
	"""Return the first agent whose patterns match the address."""
	for agent in AGENTS.values():
		if address_matches(agent, address):
			return agent
	return None


class AdapterRegistry:
	"""
	Selects the automation adapter for an agent.

	Factories registered per agent id win; otherwise the default factory
	(usually the channel provider's) is used.
	"""

	def __init__(self, default: AdapterFactory | None = None) -> None:
		self._default = default
		self._factories: dict[str, AdapterFactory] = {}

	def register(self, agent_id: str, factory: AdapterFactory) -> None:
		self._factories[agent_id] = factory

	def __contains__(self, agent_id: str) -> bool:
		return agent_id in self._factories

	def resolve(self, agent_id: str, channel: Any) -> AdapterProtocol:
		"""Build the adapter for an agent's channel.

		Raises:
			LookupError: If no factory applies.
		"""
		factory = self._factories.get(agent_id, self._default)
		if factory is None:
			raise LookupError(f"no automation adapter for {agent_id}")
		return factory(channel)


__all__ = [
    "AGENTS",
    "MAX_COUNCIL",
    "MIN_COUNCIL",
    "AdapterFactory",
    "AdapterRegistry",
    "address_matches",
    "display_names",
    "get_agent",
    "match_agent",
]
