"""
Judge response parser.

Recovers per-agent scores, the final ranking, the winner and the summary
from the judge's semi-structured markdown. Parsing is tolerant: missing
pieces default to empty values and an unusable response yields an
unparsed result carrying the raw text.
"""

from __future__ import annotations

import re
from typing import Sequence

from llm_council.models.judge_result import (
    MAX_CRITERION_SCORE,
    MAX_TOTAL_SCORE,
    JudgeResult,
    ModelScore,
)
from llm_council.utils.logging import get_logger
from llm_council.utils.parsing import (
    Section,
    find_section,
    match_known_name,
    normalize_heading,
    parse_sections,
    strip_emphasis,
)

logger = get_logger(__name__)

# (field, labels tried in order)
_CRITERION_LABELS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("accuracy", ("Accuracy", )),
    ("depth", ("Depth", )),
    ("clarity", ("Clarity", )),
    ("reasoning", ("Logical Reasoning", "Reasoning")),
    ("relevance", ("Relevance", )),
)
_NON_AGENT_HEADINGS = ("winner", "final ranking", "evaluation results")

TOTAL_RE = re.compile(r"Total\b[^\n\d]*?(\d+)\s*/\s*50(?!\d)", re.I)
JUSTIFICATION_RE = re.compile(
    r"\*\*Justification:?\*\*:?\s*(.+?)(?:\n[ \t]*\n|$)", re.I | re.S)
SUMMARY_RE = re.compile(r"\*\*Summary:?\*\*:?\s*(.+?)(?:\n[ \t]*\n|$)",
                        re.I | re.S)
WINNER_RE = re.compile(r"^[#>\s*]*Winner\s*:\s*(.+?)\s*$", re.I | re.M)
RANK_LINE_RE = re.compile(r"^\s*\d+[.)]\s*(.+?)(?:\s*[—–-]\s*\**\d+.*)?$")


def _criterion_re(label: str) -> re.Pattern[str]:
	return re.compile(rf"{re.escape(label)}[\s|*:]*?(\d+)\s*/\s*10(?!\d)",
	                  re.I)


def _clamp(value: int, upper: int) -> int:
	return max(0, min(value, upper))


def _find_agent_section(sections: Sequence[Section],
                        name: str) -> Section | None:
	"""Locate the subsection for a display name.

	An exact heading wins over one that merely contains the name.
	"""
	target = normalize_heading(name)
	candidates = [
	    s for s in sections
	    if not normalize_heading(s.heading).startswith(_NON_AGENT_HEADINGS)
	]
	for section in candidates:
		if normalize_heading(section.heading) == target:
			return section
	lowered = name.lower()
	for section in candidates:
		if lowered in section.heading.lower():
			return section
	return None


def extract_model_score(section: Section, name: str) -> ModelScore:
	"""
	Extract one agent's scores from its subsection.

	A criterion that is not found scores 0. A stated total wins over the
	sum of the criteria.

	Parameters:
		section: The agent's subsection.
		name: Display name recorded on the score.

	Returns:
		ModelScore for the agent.
	"""
	block = section.body
	values: dict[str, int] = {}
	for field, labels in _CRITERION_LABELS:
		values[field] = 0
		for label in labels:
			m = _criterion_re(label).search(block)
			if m:
				values[field] = _clamp(int(m.group(1)), MAX_CRITERION_SCORE)
				break
	total = sum(values.values())
	m = TOTAL_RE.search(block)
	if m:
		total = int(m.group(1))
	justification = ""
	m = JUSTIFICATION_RE.search(block)
	if m:
		justification = m.group(1).strip()
	return ModelScore(model_name=name,
	                  total=_clamp(total, MAX_TOTAL_SCORE),
	                  justification=justification,
	                  **values)


def extract_ranking(sections: Sequence[Section],
                    names: Sequence[str]) -> list[str]:
	"""
	Extract the ranking from the Final Ranking section.

	Each numbered line is resolved against the known names; unresolved
	lines are kept verbatim.
	"""
	section = find_section(sections, "Final Ranking")
	if section is None:
		return []
	ranking: list[str] = []
	for line in section.body.splitlines():
		m = RANK_LINE_RE.match(line)
		if not m:
			continue
		fragment = strip_emphasis(m.group(1))
		if not fragment:
			continue
		ranking.append(match_known_name(fragment, names) or fragment)
	return ranking


def extract_winner(text: str, names: Sequence[str],
                   ranking: Sequence[str]) -> str:
	m = WINNER_RE.search(text)
	if m:
		fragment = strip_emphasis(m.group(1))
		if fragment:
			return match_known_name(fragment, names) or fragment
	return ranking[0] if ranking else ""


def parse_judge_response(raw_text: str | None,
                         names: Sequence[str]) -> JudgeResult:
	"""
	Parse the judge's raw response into a JudgeResult.

	Never raises; any internal failure yields an unparsed result.

	Parameters:
		raw_text: Judge response text.
		names: Display names of the agents that were evaluated.

	Returns:
		JudgeResult with parsed=True iff at least one score was found.
	"""
	text = raw_text or ""
	try:
		sections = parse_sections(text)
		scores: list[ModelScore] = []
		for name in names:
			section = _find_agent_section(sections, name)
			if section is None:
				logger.debug("judge response has no section for %s", name)
				continue
			scores.append(extract_model_score(section, name))
		ranking = extract_ranking(sections, names)
		winner = extract_winner(text, names, ranking)
		summary = ""
		m = SUMMARY_RE.search(text)
		if m:
			summary = m.group(1).strip()
		return JudgeResult(
		    parsed=bool(scores),
		    scores=scores,
		    ranking=ranking,
		    winner=winner,
		    summary=summary,
		    raw_text=text,
		)
	except Exception:
		logger.warning("failed to parse judge response", exc_info=True)
		return JudgeResult(parsed=False, raw_text=text)


__all__ = [
    "extract_model_score",
    "extract_ranking",
    "extract_winner",
    "parse_judge_response",
]
