"""
Markdown section segmentation.

A section is a heading line plus every line after it up to (not
including) the next heading of any level. Content before the first
heading forms an implicit level-0 "(untitled)" section. Segmentation is
line based and regex driven; it does not understand fenced code, so a
`# comment` inside a code block starts a new section.
"""

from __future__ import annotations

import difflib
import re
from typing import Dict, List

from ..domain import MarkdownSection, SectionChangeReport

HEADING_RE = re.compile(r"^(#{1,6})\s+(.+)$")

INTRO_TITLE = "(untitled)"
INTRO_KEY = "__intro__"


def segment_sections(text: str) -> List[MarkdownSection]:
    """
    Split a document into sections that partition its lines.

    Lines are split on "\\n" so that joining every section's content
    with "\\n" reproduces the input exactly. The intro section is only
    emitted when it holds at least one line.
    """

    lines = text.split("\n")
    sections: List[MarkdownSection] = []

    title = INTRO_TITLE
    level = 0
    start = 0

    for i, line in enumerate(lines):
        match = HEADING_RE.match(line)
        if not match:
            continue

        if start < i:
            sections.append(_make_section(len(sections), title, level, start, i, lines))

        level = len(match.group(1))
        title = match.group(2)
        start = i

    sections.append(_make_section(len(sections), title, level, start, len(lines), lines))
    return sections


def _make_section(
    index: int,
    title: str,
    level: int,
    start: int,
    stop: int,
    lines: List[str],
) -> MarkdownSection:
    return MarkdownSection(
        index=index,
        title=title,
        level=level,
        start_line=start,
        end_line=stop - 1,
        content="\n".join(lines[start:stop]),
    )


def section_key(section: MarkdownSection) -> str:
    """
    Key used when comparing two versions of a document.

    The heading is rebuilt as "## Title", so two headings with the same
    level and text share a key.
    """

    if section.is_intro:
        return INTRO_KEY
    return f"{'#' * section.level} {section.title}"


def section_map(text: str) -> Dict[str, str]:
    """
    Map section keys to their content.

    Duplicate keys collapse: the last section with a given key wins,
    while the key keeps the position of its first occurrence.
    """

    return {section_key(s): s.content for s in segment_sections(text)}


def compare_sections(old_text: str, new_text: str) -> SectionChangeReport:
    """
    Compare two versions of a document section by section.
    """

    old_sections = section_map(old_text)
    new_sections = section_map(new_text)

    report = SectionChangeReport()
    report.added = [key for key in new_sections if key not in old_sections]
    report.removed = [key for key in old_sections if key not in new_sections]

    for key, old_content in old_sections.items():
        if key not in new_sections:
            continue
        if old_content.strip() != new_sections[key].strip():
            report.modified.append(key)
        else:
            report.unchanged.append(key)

    return report


def section_line_diff(old_content: str, new_content: str) -> str:
    """
    Render a line diff between two versions of a section.
    """

    diff = difflib.unified_diff(
        old_content.splitlines(),
        new_content.splitlines(),
        fromfile="old",
        tofile="new",
        lineterm="",
    )
    return "\n".join(diff)
