"""
Mapping of diff hunks onto markdown sections.

Given the hunks of a source file's diff and the sections of the new
version of that file, work out which sections a translator has to
revisit and what kind of change happened in each.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from ..domain import AffectedSection, DiffHunk, IndexedHunk, MarkdownSection, SectionMapping

LOG = logging.getLogger(__name__)


def map_hunks_to_sections(
    hunks: Sequence[DiffHunk],
    sections: Sequence[MarkdownSection],
) -> SectionMapping:
    """
    Attribute each hunk to the first section whose range contains it.

    A hunk belongs to a section when start_line <= new_start <=
    end_line + 1. The extra line of tolerance absorbs hunks that start
    exactly on a section boundary. Sections without hunks are left out
    of the result; hunks without a new_start are skipped and reported
    in SectionMapping.invalid.
    """

    mapping = SectionMapping()
    by_section: Dict[int, AffectedSection] = {}
    order: List[int] = []

    for index, hunk in enumerate(hunks):
        new_start = getattr(hunk, "new_start", None)
        if new_start is None:
            LOG.warning("Skipping invalid hunk #%d without a new start line: %r", index, hunk)
            mapping.invalid.append(IndexedHunk(index=index, hunk=hunk))
            continue

        section = _find_section(new_start, sections)
        if section is None:
            LOG.debug("Hunk #%d at line %d falls outside every section", index, new_start)
            continue

        if section.index not in by_section:
            by_section[section.index] = AffectedSection(section_title=section.title)
            order.append(section.index)

        affected = by_section[section.index]
        affected.hunks.append(IndexedHunk(index=index, hunk=hunk))

        op = hunk.operation.value if hunk.operation is not None else "unknown"
        if op not in affected.operation_types:
            affected.operation_types.append(op)

    mapping.affected = [by_section[i] for i in order]
    return mapping


def _find_section(
    new_start: int,
    sections: Sequence[MarkdownSection],
) -> Optional[MarkdownSection]:
    for section in sections:
        if section.start_line <= new_start <= section.end_line + 1:
            return section
    return None
