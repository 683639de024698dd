"""
Structural validation of translated markdown files.

A translation passes when it keeps the skeleton of its source: the same
number of headings, byte-identical code blocks (modulo surrounding
whitespace) and every frontmatter key. Link and list differences, and
anything to do with locale prefixes, are reported as warnings only.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple

from .analysis.structure import extract_fingerprint
from .domain import LocaleInfo, StructuralFingerprint, ValidationResult
from .errors import DocumentNotFoundError
from .scanner import find_markdown_files

LOG = logging.getLogger(__name__)

LIST_ITEM_TOLERANCE = 2

_LOCALE_SEGMENT_RE = re.compile(r"^[a-z]{2}$")
_LOCALE_PREFIX_RE = re.compile(r"^/[a-z]{2}(?:/|$)")
_EXTERNAL_PREFIXES = ("http://", "https://")


def validate_pair(
    source: str,
    target: str,
    source_locale: Optional[str] = None,
    target_locale: Optional[str] = None,
) -> ValidationResult:
    """
    Compare the structure of a translated document against its source.
    """

    src = extract_fingerprint(source)
    tgt = extract_fingerprint(target)

    result = ValidationResult()
    locale = LocaleInfo(source_locale=source_locale, target_locale=target_locale)
    if locale.known:
        result.locale_info = locale

    _check_headings(src, tgt, result)
    _check_code_blocks(src, tgt, result)
    _check_links(src, tgt, result)
    if locale.known:
        _check_link_localization(src.links, tgt.links, locale, result)
    _check_frontmatter(src, tgt, result)
    _check_list_items(src, tgt, result)

    return result


def _check_headings(src: StructuralFingerprint, tgt: StructuralFingerprint, result: ValidationResult) -> None:
    if len(src.headings) != len(tgt.headings):
        result.errors.append(
            f"Heading count mismatch: source={len(src.headings)}, target={len(tgt.headings)}"
        )


def _check_code_blocks(src: StructuralFingerprint, tgt: StructuralFingerprint, result: ValidationResult) -> None:
    if len(src.code_blocks) != len(tgt.code_blocks):
        result.errors.append(
            f"Code block count mismatch: source={len(src.code_blocks)}, target={len(tgt.code_blocks)}"
        )
        return

    pairs = zip(src.code_blocks, tgt.code_blocks)
    for number, ((src_lang, src_code), (tgt_lang, tgt_code)) in enumerate(pairs, start=1):
        if src_lang != tgt_lang:
            result.errors.append(
                f"Code block {number} language mismatch: source='{src_lang}', target='{tgt_lang}'"
            )
        if src_code.strip() != tgt_code.strip():
            result.errors.append(f"Code block {number} content changed (should be identical)")


def _check_links(src: StructuralFingerprint, tgt: StructuralFingerprint, result: ValidationResult) -> None:
    # Locale rewriting can legitimately change link counts.
    if len(src.links) != len(tgt.links):
        result.warnings.append(
            f"Link count mismatch: source={len(src.links)}, target={len(tgt.links)}"
        )


def _check_link_localization(
    src_links: Sequence[Tuple[str, str]],
    tgt_links: Sequence[Tuple[str, str]],
    locale: LocaleInfo,
    result: ValidationResult,
) -> None:
    source_urls = {url for _, url in src_links}
    target_urls = {url for _, url in tgt_links}
    src_locale = locale.source_locale
    tgt_locale = locale.target_locale

    for _, url in tgt_links:
        if is_internal_link(url):
            if src_locale and _has_literal_prefix(url, src_locale):
                result.warnings.append(f"Link '{url}' still uses source locale '{src_locale}'")
            elif not has_locale_prefix(url):
                result.warnings.append(f"Link '{url}' is missing locale prefix")
        elif is_external_link(url) and url not in source_urls:
            result.warnings.append(f"External link '{url}' not found in source")

    if not tgt_locale:
        return

    for _, url in src_links:
        if not is_internal_link(url):
            continue
        expected = localize_link(url, src_locale, tgt_locale)
        if expected not in target_urls:
            result.warnings.append(
                f"Expected localized link '{expected}' for source link '{url}' not found in target"
            )


def _check_frontmatter(src: StructuralFingerprint, tgt: StructuralFingerprint, result: ValidationResult) -> None:
    # Asymmetric: an extra key is recoverable, a lost key breaks tooling.
    missing = sorted(src.frontmatter_keys - tgt.frontmatter_keys)
    extra = sorted(tgt.frontmatter_keys - src.frontmatter_keys)

    if missing:
        result.errors.append(f"Missing frontmatter keys: {', '.join(missing)}")
    if extra:
        result.warnings.append(f"Extra frontmatter keys: {', '.join(extra)}")


def _check_list_items(src: StructuralFingerprint, tgt: StructuralFingerprint, result: ValidationResult) -> None:
    if abs(len(src.list_items) - len(tgt.list_items)) > LIST_ITEM_TOLERANCE:
        result.warnings.append(
            "List item count differs significantly: "
            f"source={len(src.list_items)}, target={len(tgt.list_items)}"
        )


def is_internal_link(url: str) -> bool:
    """Root-relative site link, e.g. /en/install."""
    return url.startswith("/") and not is_external_link(url)


def is_external_link(url: str) -> bool:
    return url.startswith(_EXTERNAL_PREFIXES)


def has_locale_prefix(url: str) -> bool:
    return bool(_LOCALE_PREFIX_RE.match(url))


def _has_literal_prefix(url: str, locale: str) -> bool:
    return url == f"/{locale}" or url.startswith(f"/{locale}/")


def localize_link(url: str, source_locale: Optional[str], target_locale: str) -> str:
    """
    Return the URL an internal source link should have in the target.

      /en/install + en -> zh   => /zh/install
      /install         -> zh   => /zh/install
      /fr/install + en -> zh   => /fr/install (left alone)
    """

    if source_locale and url.startswith(f"/{source_locale}/"):
        return f"/{target_locale}/" + url[len(source_locale) + 2 :]
    if not has_locale_prefix(url):
        return f"/{target_locale}{url}"
    return url


def detect_locale(path: str) -> Optional[str]:
    """
    Guess a locale from a path such as docs/zh/guide.md.

    The last directory segment made of exactly two lowercase letters
    wins; the file name itself is never considered.
    """

    parts = Path(path).parts[:-1] if Path(path).suffix else Path(path).parts
    for part in reversed(parts):
        if _LOCALE_SEGMENT_RE.match(part):
            return part
    return None


def resolve_locales(
    source_path: str,
    target_path: str,
    source_locale: Optional[str] = None,
    target_locale: Optional[str] = None,
) -> Tuple[Optional[str], Optional[str]]:
    """Explicit locales win over locales detected from the paths."""
    return (
        source_locale or detect_locale(source_path),
        target_locale or detect_locale(target_path),
    )


def validate_files(
    source_path: str,
    target_path: str,
    source_locale: Optional[str] = None,
    target_locale: Optional[str] = None,
) -> ValidationResult:
    """
    Validate a single source/target pair read from disk.

    A missing file is fatal here because no partial result is possible.
    """

    source = read_document(source_path)
    target = read_document(target_path)
    src_locale, tgt_locale = resolve_locales(source_path, target_path, source_locale, target_locale)
    LOG.info("Validating %s against %s (locales: %s -> %s)", target_path, source_path, src_locale, tgt_locale)
    return validate_pair(source, target, src_locale, tgt_locale)


def validate_directories(
    source_dir: str,
    target_dir: str,
    source_locale: Optional[str] = None,
    target_locale: Optional[str] = None,
) -> Dict[str, ValidationResult]:
    """
    Validate every markdown file of source_dir against its counterpart.

    Results are keyed by relative path. A missing or unreadable target
    file becomes a failed result for that file instead of aborting the
    run. A missing source_dir raises DocumentNotFoundError.
    """

    if not Path(source_dir).is_dir():
        raise DocumentNotFoundError(f"source directory not found: {source_dir}")

    src_locale, tgt_locale = resolve_locales(source_dir, target_dir, source_locale, target_locale)
    results: Dict[str, ValidationResult] = {}

    for rel_path in find_markdown_files(source_dir):
        src_file = Path(source_dir) / rel_path
        tgt_file = Path(target_dir) / rel_path

        if not tgt_file.is_file():
            LOG.info("Target file missing for %s", rel_path)
            results[rel_path] = ValidationResult(errors=[f"Target file missing: {tgt_file}"])
            continue

        try:
            source = read_document(str(src_file))
            target = read_document(str(tgt_file))
        except DocumentNotFoundError as exc:
            LOG.warning("Cannot validate %s: %s", rel_path, exc)
            results[rel_path] = ValidationResult(errors=[f"Cannot read file: {exc}"])
            continue

        results[rel_path] = validate_pair(source, target, src_locale, tgt_locale)

    return results


def read_document(path: str) -> str:
    """
    Read a markdown file as UTF-8.

    Bytes that are not valid UTF-8 are replaced with U+FFFD and a
    warning names the file.
    """

    try:
        raw = Path(path).read_bytes()
    except FileNotFoundError as exc:
        raise DocumentNotFoundError(f"file not found: {path}") from exc
    except OSError as exc:
        raise DocumentNotFoundError(f"cannot read {path}: {exc}") from exc

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        LOG.warning("%s is not valid UTF-8 (%s); undecodable bytes were replaced", path, exc.reason)
        return raw.decode("utf-8", errors="replace")
