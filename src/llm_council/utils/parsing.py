"""
Markdown parsing utilities.

Provides functions for splitting markdown into heading-bounded sections
and for matching loosely formatted names against known ones.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

HEADING_RE = re.compile(r"^[ \t]*(#{1,6})[ \t]+(.*?)[ \t#]*$", re.M)
EMPHASIS_RE = re.compile(r"[*_`]+")


@dataclass(frozen=True)
class Section:
	"""A heading and the body that follows it up to the next heading."""

	level: int
	heading: str
	body: str
	start: int
	end: int


def strip_emphasis(text: str) -> str:
	"""Remove markdown emphasis markers and surrounding whitespace."""
	return EMPHASIS_RE.sub("", text).strip()


def normalize_heading(h: str) -> str:
	"""
	Normalize headings for case-insensitive matching.

	Parameters:
		h: Heading text to normalize.

	Returns:
		Lowercase heading with non-alphanumeric chars replaced by spaces.
	"""
	return re.sub(r"[^a-z0-9]+", " ", h.lower()).strip()


def parse_sections(md: str) -> List[Section]:
	"""
	Split markdown into sections, one per heading, in document order.

	Each section's body runs from the end of its heading line to the
	start of the next heading of any level, or the end of the text.

	Parameters:
		md: Markdown content to parse.

	Returns:
		List of sections.
	"""
	sections: List[Section] = []
	matches = list(HEADING_RE.finditer(md))
	for i, m in enumerate(matches):
		end = matches[i + 1].start() if i + 1 < len(matches) else len(md)
		sections.append(
		    Section(
		        level=len(m.group(1)),
		        heading=strip_emphasis(m.group(2)),
		        body=md[m.end():end].strip("\n"),
		        start=m.start(),
		        end=end,
		    ))
	return sections


def find_section(sections: Iterable[Section],
                 heading: str) -> Optional[Section]:
	"""
	Find the first section whose normalized heading starts with the target.

	Parameters:
		sections: Parsed sections to search.
		heading: Target heading prefix to match.

	Returns:
		The matching section, or None.
	"""
	target = normalize_heading(heading)
	for section in sections:
		if normalize_heading(section.heading).startswith(target):
			return section
	return None


def match_known_name(fragment: str, known: Iterable[str]) -> Optional[str]:
	"""
	Resolve a loosely written name against known names.

	Matching is case-insensitive and bidirectional: the fragment may
	contain the known name or be contained in it.

	Parameters:
		fragment: Name as written in free text.
		known: Canonical names to match against.

	Returns:
		The first matching known name, or None.
	"""
	needle = strip_emphasis(fragment).lower()
	if not needle:
		return None
	for name in known:
		candidate = name.lower()
		if candidate in needle or needle in candidate:
			return name
	return None


__all__ = [
    "Section",
    "find_section",
    "match_known_name",
    "normalize_heading",
    "parse_sections",
    "strip_emphasis",
]
