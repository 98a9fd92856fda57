"""
Evaluation prompt model.

Holds the text sent to the judge together with the anonymization
labels, so callers can map `Response A` back to a display name.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class EvaluationPrompt(BaseModel):
	"""Judge input built from the completed council answers."""

	text: str
	labels: dict[str, str] = Field(
	    default_factory=dict,
	    description="Anonymization label -> display name",
	)
	responded: list[str] = Field(default_factory=list)
	failed: list[str] = Field(default_factory=list)

	def deanonymize(self, label: str) -> str | None:
		"""Return the display name behind a label such as `Response B`."""
		return self.labels.get(label.strip())


__all__ = ["EvaluationPrompt"]
