"""
No-translate rules for md-i18n.

A project can list headings, terms, sections and URL patterns that must
stay in the source language in `.i18n/no-translate.yaml`:

    headings:
      - text: "API Reference"
        reason: "Product name"
      - pattern: "^v\\d+\\."
        reason: "Version headings"
    terms:
      - text: "Kubernetes"
        reason: "Brand"
        context: "global"
    sections:
      - title: "Changelog"
        reason: "Generated"
    urls:
      - pattern: "https://github.com/*"
        reason: "External"
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .config import NO_TRANSLATE_FILENAME
from .errors import ConfigError

LOG = logging.getLogger(__name__)

RULE_KINDS = ("headings", "terms", "sections", "urls")


@dataclass
class NoTranslateRules:
    headings: List[Dict[str, Any]] = field(default_factory=list)
    terms: List[Dict[str, Any]] = field(default_factory=list)
    sections: List[Dict[str, Any]] = field(default_factory=list)
    urls: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {kind: list(getattr(self, kind)) for kind in RULE_KINDS}


@dataclass
class Decision:
    skip: bool
    reason: Optional[str] = None


def load_no_translate(i18n_dir: Path) -> NoTranslateRules:
    """
    Load the rules file from i18n_dir.

    A missing file means "no rules"; a file that is not a mapping of
    rule lists raises ConfigError.
    """

    config_path = Path(i18n_dir) / NO_TRANSLATE_FILENAME
    if not config_path.is_file():
        LOG.info("No %s in %s; using empty rules", NO_TRANSLATE_FILENAME, i18n_dir)
        return NoTranslateRules()

    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"{config_path} must contain a mapping of rule lists")

    rules = NoTranslateRules()
    for kind in RULE_KINDS:
        entries = raw.get(kind) or []
        if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
            raise ConfigError(f"'{kind}' in {config_path} must be a list of mappings")
        setattr(rules, kind, entries)
    return rules


def should_not_translate(text: str, kind: str, rules: Optional[NoTranslateRules]) -> Decision:
    """
    Check whether text of the given kind ("heading", "term" or
    "section") is protected by a rule.
    """

    if rules is None:
        return Decision(skip=False)

    text = text.strip()

    if kind == "heading":
        for rule in rules.headings:
            if rule.get("text") and text == rule["text"]:
                return Decision(skip=True, reason=rule.get("reason"))
            pattern = rule.get("pattern")
            if pattern and _pattern_matches(pattern, text):
                return Decision(skip=True, reason=rule.get("reason"))
    elif kind == "term":
        for rule in rules.terms:
            if rule.get("text") == text:
                return Decision(skip=True, reason=rule.get("reason"))
    elif kind == "section":
        for rule in rules.sections:
            if rule.get("title") == text:
                return Decision(skip=True, reason=rule.get("reason"))

    return Decision(skip=False)


def _pattern_matches(pattern: str, text: str) -> bool:
    try:
        return re.search(pattern, text) is not None
    except re.error as exc:
        LOG.warning("Ignoring invalid heading pattern %r: %s", pattern, exc)
        return False


def describe_rules(rules: NoTranslateRules, source: Path) -> List[str]:
    """
    Human-readable listing of the rules, one line per entry.
    """

    lines = [f"No-Translate Configuration: {source}", ""]

    if rules.headings:
        lines.append("Headings to keep in the source language:")
        for rule in rules.headings:
            if rule.get("pattern"):
                lines.append(f"  Pattern: \"{rule['pattern']}\" - {rule.get('reason', '')}")
            else:
                lines.append(f"  \"{rule.get('text', '')}\" - {rule.get('reason', '')}")
        lines.append("")

    if rules.terms:
        lines.append("Terms to keep in the source language:")
        for rule in rules.terms:
            context = rule.get("context") or "global"
            lines.append(f"  \"{rule.get('text', '')}\" - {rule.get('reason', '')} ({context})")
        lines.append("")

    if rules.sections:
        lines.append("Sections to skip:")
        for rule in rules.sections:
            lines.append(f"  \"{rule.get('title', '')}\" - {rule.get('reason', '')}")
        lines.append("")

    if rules.urls:
        lines.append("URL patterns to exclude:")
        for rule in rules.urls:
            lines.append(f"  {rule.get('pattern', '')} - {rule.get('reason', '')}")

    return lines
