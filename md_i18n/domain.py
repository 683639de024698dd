"""
Core domain models for md-i18n.

These dataclasses describe diff hunks, markdown sections, structural
fingerprints and validation results. They intentionally avoid any direct
git or filesystem dependencies so they can be reused by the different
commands.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set, Tuple


class HunkOperation(str, Enum):
    """
    Edit type of a diff hunk, derived by the hunk classifier.
    """

    ADD = "add"
    DELETE = "delete"
    MODIFY = "modify"
    FORMAT = "format"


@dataclass
class DiffHunk:
    """
    A contiguous block of changes from a unified diff.

    Deleted, added and context lines are kept as three bulk lists rather
    than a positional interleaving, so old_count is not guaranteed to
    equal len(deleted_lines) + len(context_lines). operation and
    description stay None until the hunk has been classified.
    """

    old_start: int
    old_count: int
    new_start: Optional[int]
    new_count: int
    header: str
    deleted_lines: List[str] = field(default_factory=list)
    added_lines: List[str] = field(default_factory=list)
    context_lines: List[str] = field(default_factory=list)
    operation: Optional[HunkOperation] = None
    description: Optional[str] = None

    @property
    def line_range(self) -> Optional[Tuple[int, int]]:
        """Inclusive new-file line span covered by the hunk."""
        if self.new_start is None:
            return None
        return self.new_start, self.new_start + self.new_count - 1

    def line_range_label(self) -> str:
        span = self.line_range
        if span is None:
            return "Lines ?"
        return f"Lines {span[0]}-{span[1]}"


@dataclass
class MarkdownSection:
    """
    A heading and the lines under it, up to the next heading of any level.

    Line numbers are 0-based and inclusive. The implicit intro section
    has level 0 and the title "(untitled)".
    """

    index: int
    title: str
    level: int
    start_line: int
    end_line: int
    content: str

    @property
    def is_intro(self) -> bool:
        return self.level == 0


@dataclass
class SectionChangeReport:
    """
    Section-level comparison of two versions of one document.
    """

    added: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    modified: List[str] = field(default_factory=list)
    unchanged: List[str] = field(default_factory=list)

    @property
    def total_changed(self) -> int:
        return len(self.added) + len(self.removed) + len(self.modified)

    def to_dict(self) -> Dict[str, List[str]]:
        return {
            "added": list(self.added),
            "removed": list(self.removed),
            "modified": list(self.modified),
            "unchanged": list(self.unchanged),
        }


@dataclass
class IndexedHunk:
    """
    A hunk together with its position in the parsed diff.
    """

    index: int
    hunk: DiffHunk


@dataclass
class AffectedSection:
    """
    A section of the new document and the hunks that start inside it.
    """

    section_title: str
    hunks: List[IndexedHunk] = field(default_factory=list)
    operation_types: List[str] = field(default_factory=list)

    @property
    def total_changes(self) -> int:
        return len(self.hunks)


@dataclass
class SectionMapping:
    """
    Result of mapping hunks onto sections.

    invalid holds hunks that could not be placed because they carry no
    new-file start line.
    """

    affected: List[AffectedSection] = field(default_factory=list)
    invalid: List[IndexedHunk] = field(default_factory=list)


@dataclass
class StructuralFingerprint:
    """
    The structural skeleton of one markdown document.
    """

    headings: List[Tuple[str, str]] = field(default_factory=list)
    code_blocks: List[Tuple[str, str]] = field(default_factory=list)
    links: List[Tuple[str, str]] = field(default_factory=list)
    list_items: List[str] = field(default_factory=list)
    frontmatter_keys: Set[str] = field(default_factory=set)


@dataclass
class LocaleInfo:
    source_locale: Optional[str] = None
    target_locale: Optional[str] = None

    @property
    def known(self) -> bool:
        return bool(self.source_locale or self.target_locale)


@dataclass
class ValidationResult:
    """
    Outcome of comparing a translated document against its source.

    Warnings are informational and never affect passed.
    """

    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    locale_info: Optional[LocaleInfo] = None

    @property
    def passed(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "passed": self.passed,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }
        if self.locale_info is not None:
            data["locale_info"] = {
                "source_locale": self.locale_info.source_locale,
                "target_locale": self.locale_info.target_locale,
            }
        return data
