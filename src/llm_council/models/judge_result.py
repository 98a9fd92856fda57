"""
Judge result models.

Defines the structured scores recovered from the judge's response and
the result object emitted at the end of a run.
"""

from __future__ import annotations

from typing import Iterable

from pydantic import BaseModel, Field, model_validator

CRITERIA = ("accuracy", "depth", "clarity", "reasoning", "relevance")
MAX_CRITERION_SCORE = 10
MAX_TOTAL_SCORE = MAX_CRITERION_SCORE * len(CRITERIA)

FALLBACK_SEPARATOR = "\n\n---\n\n"


class ModelScore(BaseModel):
	"""
	One agent's scoring as stated by the judge.

	The total is whatever the judge wrote on its Total line when present,
	even if it disagrees with the sum of the five criteria.
	"""

	model_name: str
	accuracy: int = Field(0, ge=0, le=MAX_CRITERION_SCORE)
	depth: int = Field(0, ge=0, le=MAX_CRITERION_SCORE)
	clarity: int = Field(0, ge=0, le=MAX_CRITERION_SCORE)
	reasoning: int = Field(0, ge=0, le=MAX_CRITERION_SCORE)
	relevance: int = Field(0, ge=0, le=MAX_CRITERION_SCORE)
	total: int = Field(0, ge=0, le=MAX_TOTAL_SCORE)
	justification: str = ""

	@property
	def criteria_sum(self) -> int:
		return sum(getattr(self, c) for c in CRITERIA)


class JudgeResult(BaseModel):
	"""Outcome of the judge round, parsed or raw."""

	parsed: bool = False
	scores: list[ModelScore] = Field(default_factory=list)
	ranking: list[str] = Field(default_factory=list)
	winner: str = ""
	summary: str = ""
	raw_text: str = ""

	@model_validator(mode="after")
	def parsed_requires_scores(self) -> "JudgeResult":
		if self.parsed and not self.scores:
			raise ValueError("a parsed judge result needs at least one score")
		return self

	def sorted_scores(self) -> list[ModelScore]:
		"""Scores ordered by total, best first."""
		return sorted(self.scores, key=lambda s: s.total, reverse=True)

	def score_for(self, model_name: str) -> ModelScore | None:
		for score in self.scores:
			if score.model_name == model_name:
				return score
		return None

	@classmethod
	def fallback(cls, responses: Iterable[tuple[str, str]]) -> "JudgeResult":
		"""Build the unparsed result used when the judge is unavailable.

		Parameters:
			responses: (display name, response text) pairs of the agents
				that completed, in request order.

		Returns:
			JudgeResult with parsed=False and the concatenated answers.
		"""
		raw = FALLBACK_SEPARATOR.join(f"{name}:\n{text}"
		                              for name, text in responses)
		return cls(parsed=False, raw_text=raw)


__all__ = [
    "CRITERIA",
    "FALLBACK_SEPARATOR",
    "MAX_CRITERION_SCORE",
    "MAX_TOTAL_SCORE",
    "JudgeResult",
    "ModelScore",
]
