"""
Unified diff parsing for md-i18n.

The parser converts a raw unified diff string (as produced by
`git diff <ref> -- <file>`) into an ordered list of DiffHunk objects.

The implementation is intentionally forgiving: it never raises. Lines it
does not understand are skipped, and headers that do not match the
`@@ -O[,o] +N[,n] @@` shape are simply not recognized as hunks, so
garbage input degrades to fewer (or no) hunks.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from .domain import DiffHunk

LOG = logging.getLogger(__name__)

_HUNK_HEADER_RE = re.compile(
    r"^@@ -(?P<old_start>\d+)(?:,(?P<old_count>\d+))?"
    r" \+(?P<new_start>\d+)(?:,(?P<new_count>\d+))?"
    r" @@"
)

_NO_NEWLINE_MARKER = "\\ No newline at end of file"
_FILE_HEADER_PREFIXES = ("---", "+++")
_METADATA_PREFIXES = ("@@", "diff", "index")


class _OpenHunk:
    """
    Mutable accumulator for the hunk currently being parsed.
    """

    def __init__(self, hunk: DiffHunk) -> None:
        self.hunk = hunk
        self.old_seen = 0
        self.new_seen = 0

    @property
    def exhausted(self) -> bool:
        # True once every line announced by the header has been read.
        return (
            self.old_seen >= self.hunk.old_count
            and self.new_seen >= self.hunk.new_count
        )

    def add_deleted(self, content: str) -> None:
        self.hunk.deleted_lines.append(content)
        self.old_seen += 1

    def add_added(self, content: str) -> None:
        self.hunk.added_lines.append(content)
        self.new_seen += 1

    def add_context(self, content: str) -> None:
        self.hunk.context_lines.append(content)
        self.old_seen += 1
        self.new_seen += 1


def parse_unified_diff(raw_diff: str) -> List[DiffHunk]:
    """
    Parse a unified diff into an ordered list of hunks.

    An empty diff yields an empty list, which callers treat as "no
    changes". The returned hunks are not yet classified.
    """

    hunks: List[DiffHunk] = []
    current: Optional[_OpenHunk] = None

    for line in raw_diff.splitlines():
        header = parse_hunk_header(line)
        if header is not None:
            if current is not None:
                hunks.append(current.hunk)
            current = _OpenHunk(header)
            continue

        if current is None:
            # Preamble such as "diff --git" / "index" / file headers.
            continue

        if line == _NO_NEWLINE_MARKER:
            continue

        if current.exhausted and line.startswith(_FILE_HEADER_PREFIXES):
            hunks.append(current.hunk)
            current = None
            continue

        if line.startswith("-"):
            current.add_deleted(line[1:])
        elif line.startswith("+"):
            current.add_added(line[1:])
        elif line.startswith(" "):
            current.add_context(line[1:])
        elif line.startswith(_METADATA_PREFIXES):
            hunks.append(current.hunk)
            current = None
        elif not line and not current.exhausted:
            # Some tools strip the single space from blank context lines.
            current.add_context("")
        else:
            LOG.debug("Ignoring unexpected diff line: %r", line)

    if current is not None:
        hunks.append(current.hunk)

    LOG.debug("Parsed %d hunk(s) from diff", len(hunks))
    return hunks


def parse_hunk_header(line: str) -> Optional[DiffHunk]:
    """
    Build an empty hunk from an `@@` header line, or return None.

    Counts default to 1 when omitted, matching the unified diff
    shorthand for single-line ranges.
    """

    match = _HUNK_HEADER_RE.match(line)
    if not match:
        return None

    old_count = match.group("old_count")
    new_count = match.group("new_count")
    return DiffHunk(
        old_start=int(match.group("old_start")),
        old_count=int(old_count) if old_count is not None else 1,
        new_start=int(match.group("new_start")),
        new_count=int(new_count) if new_count is not None else 1,
        header=line,
    )
