"""
Classification of diff hunks by edit type.

The functions here operate purely on the domain models and do not
interact with git or the filesystem.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List, Tuple

from ..domain import DiffHunk, HunkOperation


def classify_hunk(hunk: DiffHunk) -> DiffHunk:
    """
    Return a copy of the hunk annotated with its operation and description.

    Rules, in priority order:
      - only added lines            -> add
      - only deleted lines          -> delete
      - line-for-line equal once
        surrounding whitespace is
        stripped                    -> format
      - anything else               -> modify
    """

    operation, description = _operation_for(hunk)
    return replace(hunk, operation=operation, description=description)


def classify_hunks(hunks: Iterable[DiffHunk]) -> List[DiffHunk]:
    return [classify_hunk(hunk) for hunk in hunks]


def is_whitespace_only(hunk: DiffHunk) -> bool:
    """
    True when deleted and added lines match pairwise after strip().
    """

    if len(hunk.deleted_lines) != len(hunk.added_lines):
        return False

    return all(
        deleted.strip() == added.strip()
        for deleted, added in zip(hunk.deleted_lines, hunk.added_lines)
    )


def _operation_for(hunk: DiffHunk) -> Tuple[HunkOperation, str]:
    deleted = len(hunk.deleted_lines)
    added = len(hunk.added_lines)

    if not deleted and added:
        return HunkOperation.ADD, f"Add {added} line(s)"
    if deleted and not added:
        return HunkOperation.DELETE, f"Delete {deleted} line(s)"
    if is_whitespace_only(hunk):
        return HunkOperation.FORMAT, "Format/whitespace change"
    return HunkOperation.MODIFY, f"Replace {deleted} line(s) with {added} line(s)"
