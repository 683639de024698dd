"""
Translation plan files for md-i18n.

A plan is a YAML document with `meta`, `summary`, `files` and `log`
keys that tracks which source files still need translating. Plans are
plain dicts so that fields written by other tools (or by hand) survive a
load/update/write cycle untouched.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import DocumentNotFoundError, PlanEntryNotFoundError, PlanError
from .scanner import SyncStatus, classify_pair, file_stats, find_markdown_files

LOG = logging.getLogger(__name__)

VALID_STATUSES = ("pending", "in_progress", "done", "skipped", "needs_update", "deleted")

SYNC_NOTES = {
    SyncStatus.NEW: "NEW: new source file, needs translation",
    SyncStatus.MODIFIED: "MODIFIED: source changed, translation needs updating",
    SyncStatus.UNCHANGED: "UNCHANGED: file not modified",
    SyncStatus.DELETED: "DELETED: source removed, target should be deleted",
}


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _overall_status(remaining: int, completed: int) -> str:
    if remaining == 0:
        return "completed"
    return "in_progress" if completed > 0 else "not_started"


def create_plan(source_dir: str, target_dir: str) -> Dict[str, Any]:
    """
    Build a fresh translation plan for every markdown file in source_dir.

    Files whose translation already exists are marked done.
    """

    source_files = find_markdown_files(source_dir)
    if not source_files:
        raise DocumentNotFoundError(f"no .md/.mdx files found in {source_dir}")

    files: List[Dict[str, Any]] = []
    completed = 0
    for rel_path in source_files:
        target_path = Path(target_dir) / rel_path
        exists = target_path.is_file()
        if exists:
            completed += 1
        files.append(
            {
                "source": str(Path(source_dir) / rel_path),
                "target": str(target_path),
                "status": "done" if exists else "pending",
                "notes": "",
            }
        )

    remaining = len(files) - completed
    LOG.info("Planned %d file(s): %d done, %d pending", len(files), completed, remaining)

    return {
        "meta": {
            "created": utc_timestamp(),
            "source_dir": source_dir,
            "target_dir": target_dir,
            "status": _overall_status(remaining, completed),
        },
        "summary": {
            "total": len(files),
            "completed": completed,
            "remaining": remaining,
        },
        "files": files,
        "log": [],
    }


def sync_plan(source_dir: str, target_dir: str) -> Dict[str, Any]:
    """
    Build a sync plan by comparing the two directory trees.

    Every relative path present on either side becomes one entry,
    classified as new, modified, unchanged or deleted.
    """

    source_files = set(find_markdown_files(source_dir))
    target_files = set(find_markdown_files(target_dir))

    counts = {status: 0 for status in SyncStatus}
    entries: List[Dict[str, Any]] = []

    for rel_path in sorted(source_files | target_files):
        source_path = Path(source_dir) / rel_path
        target_path = Path(target_dir) / rel_path
        src_stats = file_stats(source_path) if rel_path in source_files else None
        tgt_stats = file_stats(target_path) if rel_path in target_files else None

        listed_both = rel_path in source_files and rel_path in target_files
        if listed_both and (src_stats is None or tgt_stats is None):
            entries.append(
                {
                    "source": str(source_path),
                    "target": str(target_path),
                    "status": "pending",
                    "notes": "ERROR: could not read file state",
                }
            )
            continue
        if src_stats is None and tgt_stats is None:
            continue

        status = classify_pair(src_stats, tgt_stats)
        counts[status] += 1
        LOG.info("  %s: %s", status.label, rel_path)

        entry: Dict[str, Any] = {
            "source": None if status is SyncStatus.DELETED else str(source_path),
            "target": str(target_path),
            "status": status.value,
            "notes": SYNC_NOTES[status],
        }
        if status is SyncStatus.MODIFIED:
            entry.update(
                {
                    "source_hash": src_stats.digest,
                    "target_hash": tgt_stats.digest,
                    "source_mtime": src_stats.mtime.isoformat(),
                    "target_mtime": tgt_stats.mtime.isoformat(),
                }
            )
        elif status is SyncStatus.UNCHANGED:
            entry["source_hash"] = src_stats.digest
        entries.append(entry)

    needs_action = counts[SyncStatus.NEW] + counts[SyncStatus.MODIFIED] + counts[SyncStatus.DELETED]

    return {
        "meta": {
            "created": utc_timestamp(),
            "source_dir": source_dir,
            "target_dir": target_dir,
            "type": "sync",
            "status": _overall_status(needs_action, counts[SyncStatus.UNCHANGED]),
        },
        "summary": {
            "total": len(entries),
            "new": counts[SyncStatus.NEW],
            "deleted": counts[SyncStatus.DELETED],
            "modified": counts[SyncStatus.MODIFIED],
            "unchanged": counts[SyncStatus.UNCHANGED],
            "needs_action": needs_action,
        },
        "files": entries,
        "log": [],
    }


def update_plan(
    plan: Dict[str, Any],
    source_file: str,
    status: str,
    notes: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Set the status of one plan entry and record it in the log.

    The first entry whose source equals, or ends with, source_file is
    updated. Entries without a source (deleted files) are matched on
    their target instead. All other entries and fields are preserved.
    """

    if status not in VALID_STATUSES:
        raise PlanError(f"invalid status {status!r}; expected one of {', '.join(VALID_STATUSES)}")

    files = plan.get("files")
    if not isinstance(files, list):
        raise PlanError("plan has no 'files' list")

    entry = _find_entry(files, source_file)
    if entry is None:
        raise PlanEntryNotFoundError(f"file not found in plan: {source_file}")

    entry["status"] = status
    if notes is not None:
        entry["notes"] = notes

    plan.setdefault("log", []).append(
        {
            "time": utc_timestamp(),
            "file": entry.get("source") or entry.get("target"),
            "action": status,
            "notes": notes or "",
        }
    )

    completed = sum(1 for f in files if f.get("status") == "done")
    remaining = len(files) - completed
    plan.setdefault("summary", {}).update({"completed": completed, "remaining": remaining})
    plan.setdefault("meta", {})["status"] = "completed" if remaining == 0 else "in_progress"
    return plan


def _find_entry(files: List[Dict[str, Any]], wanted: str) -> Optional[Dict[str, Any]]:
    for entry in files:
        path = entry.get("source") or entry.get("target")
        if isinstance(path, str) and (path == wanted or path.endswith(wanted)):
            return entry
    return None


def plan_progress(plan: Dict[str, Any]) -> str:
    summary = plan.get("summary", {})
    total = len(plan.get("files", []))
    return f"Progress: {summary.get('completed', 0)}/{total} ({summary.get('remaining', 0)} remaining)"


def dump_plan(plan: Dict[str, Any]) -> str:
    return yaml.safe_dump(
        plan,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        indent=2,
        width=float("inf"),
    )


def write_plan(plan: Dict[str, Any], path: Path) -> Path:
    """
    Write the plan as YAML, creating parent directories as needed.
    """

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_plan(plan), encoding="utf-8")
    LOG.info("Wrote plan to %s", path)
    return path


def load_plan(path: Path) -> Dict[str, Any]:
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise PlanError(f"plan file not found: {path}") from exc
    except OSError as exc:
        raise PlanError(f"cannot read plan file {path}: {exc}") from exc

    try:
        plan = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise PlanError(f"invalid YAML in plan file {path}: {exc}") from exc

    if not isinstance(plan, dict):
        raise PlanError(f"plan file {path} does not contain a mapping")
    return plan


def update_plan_file(
    path: Path,
    source_file: str,
    status: str,
    notes: Optional[str] = None,
) -> Dict[str, Any]:
    plan = load_plan(path)
    update_plan(plan, source_file, status, notes)
    write_plan(plan, path)
    return plan
