"""
Result rendering and persistence utilities.

Provides the plain-text export of a judge result and a helper to save
it to disk.
"""

from __future__ import annotations

from pathlib import Path

from llm_council.models.judge_result import JudgeResult, MAX_TOTAL_SCORE

HEADER = "LLM Council Evaluation"


def format_result_text(result: JudgeResult | None) -> str:
	"""
	Render a judge result as plain text for copying or saving.

	Parsed results list the winner and each score, best first, with the
	criteria breakdown and justification. Unparsed results fall back to
	the raw text.

	Parameters:
		result: Judge result, or None.

	Returns:
		Plain-text export.
	"""
	lines = [HEADER, ""]
	if result is None:
		lines.append("No results.")
		return "\n".join(lines) + "\n"
	if not result.parsed:
		lines.append(result.raw_text or "No results.")
		return "\n".join(lines) + "\n"
	if result.winner:
		lines.extend([f"Winner: {result.winner}", ""])
	for s in result.sorted_scores():
		lines.append(f"{s.model_name}: {s.total}/{MAX_TOTAL_SCORE} "
		             f"(Acc:{s.accuracy} Dep:{s.depth} Cla:{s.clarity} "
		             f"Rea:{s.reasoning} Rel:{s.relevance})")
		if s.justification:
			lines.append(f'  "{s.justification}"')
	if result.ranking:
		lines.append("")
		lines.append("Ranking:")
		lines.extend(f"  {i}. {name}"
		             for i, name in enumerate(result.ranking, start=1))
	if result.summary:
		lines.extend(["", f"Summary: {result.summary}"])
	return "\n".join(lines) + "\n"


def save_result_text(path: Path | str, content: str) -> None:
	"""
	Persist exported text to disk, ensuring parent directories.

	Parameters:
		path: Destination file path.
		content: Text to write.
	"""
	Path(path).parent.mkdir(parents=True, exist_ok=True)
	Path(path).write_text(content, encoding="utf-8")


__all__ = ["format_result_text", "save_result_text"]
