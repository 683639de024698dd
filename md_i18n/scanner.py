"""
Directory scanning and content hashing for md-i18n.

These helpers discover markdown files under a language directory and
classify a source/target file pair for sync plans.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import List, Optional

LOG = logging.getLogger(__name__)

MARKDOWN_SUFFIXES = (".md", ".mdx")


class SyncStatus(str, Enum):
    """
    Relationship between a source file and its translation.

    The value is the status written into plan files.
    """

    NEW = "pending"
    MODIFIED = "needs_update"
    UNCHANGED = "done"
    DELETED = "deleted"

    @property
    def label(self) -> str:
        return self.name


@dataclass
class FileStats:
    digest: str
    size: int
    mtime: datetime


def find_markdown_files(root: str) -> List[str]:
    """
    Return sorted POSIX paths, relative to root, of .md/.mdx files.

    A missing or unreadable directory yields an empty list.
    """

    base = Path(root)
    if not base.is_dir():
        LOG.debug("Markdown root %s does not exist", root)
        return []

    found = [
        path.relative_to(base).as_posix()
        for path in base.rglob("*")
        if path.is_file() and path.name.endswith(MARKDOWN_SUFFIXES)
    ]
    return sorted(found)


def file_digest(path: Path) -> Optional[str]:
    """md5 hex digest of the file content, or None when unreadable."""
    try:
        return hashlib.md5(path.read_bytes()).hexdigest()
    except OSError as exc:
        LOG.warning("Cannot hash %s: %s", path, exc)
        return None


def file_stats(path: Path) -> Optional[FileStats]:
    digest = file_digest(path)
    if digest is None:
        return None
    try:
        stat = path.stat()
    except OSError as exc:
        LOG.warning("Cannot stat %s: %s", path, exc)
        return None
    return FileStats(
        digest=digest,
        size=stat.st_size,
        mtime=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
    )


def classify_pair(
    source_stats: Optional[FileStats],
    target_stats: Optional[FileStats],
) -> SyncStatus:
    """
    Classify a pair by presence and content hash.

    Pass None for a file that is absent. The caller must handle pairs
    that are listed on both sides but could not be read.
    """

    if source_stats is not None and target_stats is None:
        return SyncStatus.NEW
    if source_stats is None and target_stats is not None:
        return SyncStatus.DELETED
    if source_stats is None or target_stats is None:
        raise ValueError("cannot classify a pair where neither file exists")
    if source_stats.digest != target_stats.digest:
        return SyncStatus.MODIFIED
    return SyncStatus.UNCHANGED
