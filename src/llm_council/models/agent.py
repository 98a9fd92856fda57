"""
Agent definition model.

Defines the immutable Agent model describing one supported remote
conversational agent and how its channels are recognised.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Agent(BaseModel):
	"""A named participant type that can sit on the council or judge."""

	model_config = ConfigDict(frozen=True)

	id: str = Field(description="Stable agent identifier")
	name: str = Field(description="Display name used in prompts and results")
	url: str = Field(description="Canonical entry-point address")
	match_patterns: tuple[str, ...] = Field(
	    default_factory=tuple,
	    description="Address fragments that identify this agent's channels",
	)
	model: str | None = Field(
	    default=None,
	    description="Backing model for providers that need one",
	)


__all__ = ["Agent"]
