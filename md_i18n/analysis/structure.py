"""
Structural fingerprint extraction.

Each element kind is extracted independently with a regular expression;
no element is cross-checked against another. In particular headings and
list items inside fenced code are still counted, which is harmless when
source and target share identical code blocks.
"""

from __future__ import annotations

import re
from typing import List, Set, Tuple

from ..domain import StructuralFingerprint
from .sections import HEADING_RE

# Non-greedy: an unterminated fence swallows text up to the next fence.
CODE_BLOCK_RE = re.compile(r"```(\w*)\n(.*?)```", re.DOTALL)
LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
# Anchored at column 0, so nested (indented) items are not counted.
LIST_ITEM_RE = re.compile(r"^[-*]\s+(.+)$")
FRONTMATTER_RE = re.compile(r"^---\n(.*?)\n---", re.DOTALL)


def extract_fingerprint(text: str) -> StructuralFingerprint:
    lines = text.split("\n")
    return StructuralFingerprint(
        headings=extract_headings(lines),
        code_blocks=[(m.group(1), m.group(2)) for m in CODE_BLOCK_RE.finditer(text)],
        links=[(m.group(1), m.group(2)) for m in LINK_RE.finditer(text)],
        list_items=_match_lines(LIST_ITEM_RE, lines),
        frontmatter_keys=extract_frontmatter_keys(text),
    )


def extract_headings(lines: List[str]) -> List[Tuple[str, str]]:
    headings: List[Tuple[str, str]] = []
    for line in lines:
        match = HEADING_RE.match(line)
        if match:
            headings.append((match.group(1), match.group(2)))
    return headings


def extract_frontmatter_keys(text: str) -> Set[str]:
    """
    Return the keys of a leading `---` frontmatter block.

    Only key presence is recorded; values are never parsed, so nested or
    multi-line YAML values contribute whatever "key:" prefixes their
    lines happen to contain.
    """

    match = FRONTMATTER_RE.match(text)
    if not match:
        return set()

    keys: Set[str] = set()
    for line in match.group(1).split("\n"):
        colon = line.find(":")
        if colon > 0:
            keys.add(line[:colon].strip())
    return keys


def _match_lines(pattern: "re.Pattern[str]", lines: List[str]) -> List[str]:
    items: List[str] = []
    for line in lines:
        match = pattern.match(line)
        if match:
            items.append(match.group(1))
    return items
