"""
Evaluation prompt synthesis.

Turns the original prompt and the council's result records into the
text sent to the judge. The chairman preamble comes from a template;
the output format the judge parser depends on is always appended by code.
"""

from __future__ import annotations

import string
from typing import Iterable, Sequence

from llm_council.loaders.prompts import load_judge_template
from llm_council.models.evaluation import EvaluationPrompt
from llm_council.models.run_state import AgentResult, AgentStatus
from llm_council.utils.logging import get_logger

logger = get_logger(__name__)

REQUIRED_PLACEHOLDER = "responses"

_CRITERION_ROWS = (
    "| Criterion | Score |",
    "|-----------|-------|",
    "| Accuracy | X/10 |",
    "| Depth | X/10 |",
    "| Clarity | X/10 |",
    "| Logical Reasoning | X/10 |",
    "| Relevance | X/10 |",
    "| **Total** | **XX/50** |",
)


def anonymized_label(index: int) -> str:
	"""Return `Response A`, `Response B`, ... for a zero-based index."""
	letters = ""
	index += 1
	while index:
		index, rem = divmod(index - 1, 26)
		letters = chr(65 + rem) + letters
	return f"Response {letters}"


def render_output_template(names: Sequence[str]) -> str:
	"""
	Render the literal output format the judge must follow.

	Parameters:
		names: Display names of the completed agents, in order.

	Returns:
		The format block, starting with the IMPORTANT instruction.
	"""
	lines = [
	    "IMPORTANT: Return the evaluation in this EXACT format:",
	    "",
	    "## Evaluation Results",
	    "",
	]
	for name in names:
		lines.append(f"### {name}")
		lines.extend(_CRITERION_ROWS)
		lines.append("")
		lines.append("**Justification:** [Your analysis of what this "
		             "response does well and poorly]")
		lines.append("")
	lines.append("### Final Ranking")
	lines.extend(f"{i}. [Model Name] — XX/50"
	             for i in range(1, len(names) + 1))
	lines.append("")
	lines.append("### Winner: [Model Name]")
	lines.append("**Summary:** [Synthesize why this response best "
	             "represents the council's collective wisdom, considering "
	             "patterns of agreement across responses and the winner's "
	             "unique strengths]")
	return "\n".join(lines)


def _template(custom: str | None) -> string.Template:
	if custom is not None:
		tpl = string.Template(custom)
		if REQUIRED_PLACEHOLDER in tpl.get_identifiers():
			return tpl
		logger.warning("judge template has no ${%s} placeholder, "
		               "using the default", REQUIRED_PLACEHOLDER)
	return string.Template(load_judge_template())


def build_evaluation_prompt(
    original_prompt: str,
    results: Iterable[AgentResult],
    template: str | None = None,
) -> EvaluationPrompt:
	"""
	Build the judge input from the council's result records.

	Records are split into completed (status complete with a response)
	and failed. Completed answers are labelled Response A, B, ... in the
	order given; failed agents are named in a note so the judge does not
	score them.

	Parameters:
		original_prompt: The prompt the council answered.
		results: Council result records, in request order.
		template: Optional chairman preamble overriding the packaged one.

	Returns:
		EvaluationPrompt with the text and the label mapping.
	"""
	responded: list[AgentResult] = []
	failed: list[str] = []
	for record in results:
		if record.status == AgentStatus.COMPLETE and record.response:
			responded.append(record)
		else:
			failed.append(record.name)

	labels = {
	    anonymized_label(i): record.name
	    for i, record in enumerate(responded)
	}
	blocks = "\n".join(f"{label}:\n{record.response}\n"
	                   for label, record in zip(labels, responded))
	failed_note = ""
	if failed:
		failed_note = (f"Note: The following models did not provide a "
		               f"response: {', '.join(failed)}. Exclude them from "
		               f"evaluation.\n\n")

	preamble = _template(template).safe_substitute(
	    original_prompt=original_prompt,
	    failed_note=failed_note,
	    responses=blocks,
	)
	names = [record.name for record in responded]
	text = preamble.rstrip() + "\n\n" + render_output_template(names)
	return EvaluationPrompt(text=text,
	                        labels=labels,
	                        responded=names,
	                        failed=failed)


__all__ = [
    "anonymized_label",
    "build_evaluation_prompt",
    "render_output_template",
]
