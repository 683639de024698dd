"""
Text and JSON rendering of md-i18n results.

Renderers return strings; printing and exit codes are the CLI's job.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional

from .analysis.sections import section_line_diff, section_map
from .domain import SectionChangeReport, ValidationResult


def render_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def render_validation(result: ValidationResult) -> str:
    lines = [f"ERROR: {err}" for err in result.errors]
    lines.extend(f"WARN: {warn}" for warn in result.warnings)
    lines.append("")
    lines.append("PASSED" if result.passed else "FAILED")
    return "\n".join(lines)


def render_directory_validation(results: Mapping[str, ValidationResult]) -> str:
    lines: List[str] = []
    for path, result in results.items():
        lines.append(f"{'✓' if result.passed else '✗'} {path}")
        lines.extend(f"  ERROR: {err}" for err in result.errors)
        lines.extend(f"  WARN: {warn}" for warn in result.warnings)

    all_passed = all(result.passed for result in results.values())
    lines.append("")
    lines.append("PASSED" if all_passed else "FAILED")
    return "\n".join(lines)


def directory_validation_json(results: Mapping[str, ValidationResult]) -> Dict[str, Any]:
    return {path: result.to_dict() for path, result in results.items()}


def render_section_changes(
    report: SectionChangeReport,
    old_text: Optional[str] = None,
    new_text: Optional[str] = None,
) -> str:
    """
    Render a section comparison; pass both texts to include line diffs
    of the modified sections.
    """

    blocks: List[str] = []
    if report.added:
        blocks.append("\n".join(["ADDED SECTIONS:"] + [f"  + {key}" for key in report.added]))
    if report.removed:
        blocks.append("\n".join(["REMOVED SECTIONS:"] + [f"  - {key}" for key in report.removed]))
    if report.modified:
        blocks.append("\n".join(["MODIFIED SECTIONS:"] + [f"  ~ {key}" for key in report.modified]))

    if report.total_changed == 0:
        return "No changes detected."

    blocks.append(f"Total: {report.total_changed} section(s) changed")

    if old_text is not None and new_text is not None and report.modified:
        old_sections = section_map(old_text)
        new_sections = section_map(new_text)
        diffs = ["=" * 60]
        for key in report.modified:
            diffs.append(f"### {key}")
            diffs.append(section_line_diff(old_sections[key], new_sections[key]))
        blocks.append("\n".join(diffs))

    return "\n\n".join(blocks)


def render_git_sync_summary(plan: Mapping[str, Any], output_path: str) -> str:
    meta = plan["meta"]
    summary = plan["summary"]
    lines = [f"Sync plan created: {output_path}"]

    if not summary.get("has_changes"):
        lines.append(f"No changes detected in {meta['source_file']} compared to {meta['git_ref']}.")
        lines.append("No action needed - file is up to date.")
        return "\n".join(lines)

    lines.append("")
    lines.append(f"Changes detected in {summary['affected_sections']} section(s):")
    for section in plan["affected_sections"]:
        lines.append(f"  - {section['section_title']} ({', '.join(section['operation_types'])})")

    if not summary.get("target_exists"):
        lines.append("")
        lines.append(f"Warning: target file does not exist: {meta['target_file']}")
        lines.append("  Full translation will be needed.")

    ops = summary["operations"]
    lines.append("")
    lines.append("Operation Summary:")
    labels = {
        "add": "translate and insert",
        "delete": "remove from target",
        "modify": "translate changes",
        "format": "adjust formatting",
    }
    for op, hint in labels.items():
        if ops.get(op):
            lines.append(f"  {op.upper()}: {ops[op]} change(s) - {hint}")

    lines.append("")
    lines.append("Next steps:")
    lines.append("  1. Review the plan file for detailed change information")
    lines.append("  2. Process changes by operation type")
    lines.append(f"  3. Validate: md-i18n validate \"{meta['source_file']}\" \"{meta['target_file']}\"")
    return "\n".join(lines)


def render_create_plan_summary(plan: Mapping[str, Any], output_path: str) -> str:
    summary = plan["summary"]
    return "\n".join(
        [
            f"Plan created: {output_path}",
            f"Total files: {summary['total']}",
            f"Already done: {summary['completed']}",
            f"Pending: {summary['remaining']}",
        ]
    )


def render_sync_plan_summary(plan: Mapping[str, Any], output_path: str) -> str:
    summary = plan["summary"]
    lines = [
        f"Sync plan created: {output_path}",
        "",
        "Summary:",
        f"  New files:      {summary['new']}",
        f"  Modified files: {summary['modified']}",
        f"  Deleted files:  {summary['deleted']}",
        f"  Unchanged:      {summary['unchanged']}",
        f"  Total:          {summary['total']}",
        "",
        f"Actions needed: {summary['needs_action']}",
    ]
    if summary["deleted"]:
        lines.append("")
        lines.append(f"Warning: {summary['deleted']} file(s) deleted in source.")
        lines.append("  Review the plan and manually delete target files if needed.")
    return "\n".join(lines)
