"""
Git-diff driven sync planning for md-i18n.

The planner is responsible for:
  - obtaining the diff of a source document from git,
  - parsing and classifying its hunks,
  - locating the sections of the current document that the hunks touch, and
  - assembling a plan a translator (human or agent) can work through.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .analysis.classifier import classify_hunks
from .analysis.mapper import map_hunks_to_sections
from .analysis.sections import segment_sections
from .diff_parser import parse_unified_diff
from .domain import AffectedSection, DiffHunk, HunkOperation
from .git_adapter import ensure_git_repo, get_file_diff
from .plans import utc_timestamp
from .validation import read_document

LOG = logging.getLogger(__name__)

PLAN_TYPE = "git-diff-sync"
FORMAT_VERSION = "2.0"

EXECUTION_STEPS = [
    "1. Review the affected sections and operation types",
    "2. For each section, process changes in order:",
    "   - ADD: Translate new lines and insert at target",
    "   - DELETE: Remove corresponding lines from target",
    "   - MODIFY: Translate changes and update target",
    "   - FORMAT: Adjust formatting (spacing, indentation)",
    "3. Preserve code blocks, URLs, and technical terms",
    "4. Validate structure and links",
    "5. Run validation: md-i18n validate <source.md> <target.md>",
]

EXECUTION_TIPS = [
    "For ADD operations: Focus on translating new content",
    "For DELETE operations: Ensure target deletion is safe",
    "For MODIFY operations: Compare old and new, translate only deltas",
    "For FORMAT operations: Adjust spacing without changing content",
]


def build_git_sync_plan(
    source_file: str,
    target_file: str,
    git_ref: str = "HEAD",
    cwd: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Build a sync plan from the changes to source_file since git_ref.
    """

    LOG.info("Analyzing git changes of %s against %s", source_file, git_ref)
    ensure_git_repo(cwd)

    git_diff = get_file_diff(source_file, git_ref, cwd=cwd)
    meta = {
        "created": utc_timestamp(),
        "source_file": source_file,
        "target_file": target_file,
        "git_ref": git_ref,
        "type": PLAN_TYPE,
        "format_version": FORMAT_VERSION,
        "status": "pending",
    }

    if not git_diff.has_changes:
        LOG.info("No changes detected in %s compared to %s", source_file, git_ref)
        meta["status"] = "completed"
        return {
            "meta": meta,
            "summary": {"has_changes": False, "message": "No changes detected"},
            "changes": [],
            "affected_sections": [],
            "execution": None,
        }

    hunks = classify_hunks(parse_unified_diff(git_diff.raw_diff))
    LOG.info("Found %d change hunk(s)", len(hunks))

    new_content = read_document(str(_resolve(source_file, cwd)))

    mapping = map_hunks_to_sections(hunks, segment_sections(new_content))
    target_exists = _resolve(target_file, cwd).is_file()
    if not target_exists:
        LOG.warning("Target file does not exist: %s; full translation will be needed", target_file)

    execution = execution_instructions(hunks)

    return {
        "meta": meta,
        "summary": {
            "has_changes": True,
            "total_hunks": len(hunks),
            "affected_sections": len(mapping.affected),
            "target_exists": target_exists,
            "operations": execution["operation_summary"],
        },
        "changes": [_change_record(index, hunk) for index, hunk in enumerate(hunks)],
        "affected_sections": [_section_record(section) for section in mapping.affected],
        "execution": execution,
    }


def operation_summary(hunks: List[DiffHunk]) -> Dict[str, int]:
    counts = {op.value: 0 for op in HunkOperation}
    for hunk in hunks:
        if hunk.operation is not None:
            counts[hunk.operation.value] += 1
    return counts


def execution_instructions(hunks: List[DiffHunk]) -> Dict[str, Any]:
    return {
        "steps": list(EXECUTION_STEPS),
        "operation_summary": operation_summary(hunks),
        "tips": list(EXECUTION_TIPS),
    }


def _change_record(index: int, hunk: DiffHunk) -> Dict[str, Any]:
    return {
        "hunk_index": index,
        "operation": hunk.operation.value if hunk.operation is not None else None,
        "description": hunk.description,
        "line_range": hunk.line_range_label(),
        "old_start": hunk.old_start,
        "old_count": hunk.old_count,
        "new_start": hunk.new_start,
        "new_count": hunk.new_count,
        "deleted_lines": list(hunk.deleted_lines),
        "added_lines": list(hunk.added_lines),
        "context_lines": list(hunk.context_lines),
        "header": hunk.header,
    }


def _section_record(section: AffectedSection) -> Dict[str, Any]:
    return {
        "section_title": section.section_title,
        "operation_types": list(section.operation_types),
        "total_changes": section.total_changes,
        "hunks": [
            {
                "hunk_index": item.index,
                "operation": item.hunk.operation.value if item.hunk.operation is not None else None,
                "description": item.hunk.description,
            }
            for item in section.hunks
        ],
    }


def _resolve(path: str, cwd: Optional[str]) -> Path:
    candidate = Path(path)
    if cwd is not None and not candidate.is_absolute():
        return Path(cwd) / candidate
    return candidate
