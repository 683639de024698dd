"""
Command-line interface for md-i18n.

This module is responsible for argument parsing, delegating to the
command implementations, printing their reports and mapping outcomes to
exit codes.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .analysis.sections import compare_sections
from .config import NO_TRANSLATE_FILENAME, Config, default_plan_path, find_i18n_dir, resolve_i18n_dir
from .errors import I18nError
from .git_sync import build_git_sync_plan
from .logging_utils import configure_logging
from .no_translate import describe_rules, load_no_translate
from .plans import (
    VALID_STATUSES,
    create_plan,
    dump_plan,
    plan_progress,
    sync_plan,
    update_plan_file,
    write_plan,
)
from .report import (
    directory_validation_json,
    render_create_plan_summary,
    render_directory_validation,
    render_git_sync_summary,
    render_json,
    render_section_changes,
    render_sync_plan_summary,
    render_validation,
)
from .validation import read_document, validate_directories, validate_files

INSTALL_DIR = Path(__file__).resolve().parent


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="md-i18n",
        description=(
            "Track, plan and validate translations of markdown documentation "
            "between a source and a target language directory."
        ),
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (can be specified multiple times).",
    )

    sub = parser.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    validate = sub.add_parser(
        "validate",
        help="Check that a translation preserves the structure of its source.",
    )
    validate.add_argument("source", help="Source file (or directory with --dir).")
    validate.add_argument("target", help="Target file (or directory with --dir).")
    validate.add_argument("--dir", dest="is_dir", action="store_true", help="Validate all files in directories.")
    validate.add_argument("--json", dest="json_output", action="store_true", help="Output as JSON.")
    validate.add_argument("--source-locale", help="Source locale, e.g. en (detected from the path if omitted).")
    validate.add_argument("--target-locale", help="Target locale, e.g. zh (detected from the path if omitted).")

    diff_sections = sub.add_parser(
        "diff-sections",
        help="List sections that changed between two versions of a document.",
    )
    diff_sections.add_argument("old", help="Old version of the document.")
    diff_sections.add_argument("new", help="New version of the document.")
    diff_sections.add_argument("--json", dest="json_output", action="store_true", help="Output as JSON.")
    diff_sections.add_argument("--show-diff", action="store_true", help="Show line diffs for modified sections.")

    git_sync = sub.add_parser(
        "git-sync",
        help="Plan an incremental translation update from the git diff of a source file.",
    )
    git_sync.add_argument("source", help="Source file, e.g. docs/en/guide.md.")
    git_sync.add_argument("target", help="Target translation, e.g. docs/zh/guide.md.")
    git_sync.add_argument("-r", "--ref", default="HEAD", help="Git reference to compare with (default: HEAD).")
    git_sync.add_argument("-o", "--output", help="Custom output path for the plan.")

    create = sub.add_parser("create-plan", help="Create a translation plan for a source directory.")
    create.add_argument("source_dir")
    create.add_argument("target_dir")
    create.add_argument("-o", "--output", help="Custom output path for the plan.")
    create.add_argument("--dry-run", action="store_true", help="Print the plan instead of writing it.")

    sync = sub.add_parser("sync-plan", help="Compare two directories and plan the needed sync work.")
    sync.add_argument("source_dir")
    sync.add_argument("target_dir")
    sync.add_argument("-o", "--output", help="Custom output path for the plan.")

    update = sub.add_parser("update-plan", help="Update the status of one file in a plan.")
    update.add_argument("plan", help="Plan file to update.")
    update.add_argument("source", help="Source file (a path suffix is enough).")
    update.add_argument("status", choices=VALID_STATUSES)
    update.add_argument("-n", "--notes", help="Notes to store with the entry.")

    rules = sub.add_parser("no-translate", help="Show the project's no-translate rules.")
    rules.add_argument("--project-dir", help="Project directory holding .i18n (default: cwd).")
    rules.add_argument("--format", choices=("json", "text"), default="json")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    config = Config(
        cwd=Path.cwd(),
        output=getattr(args, "output", None),
        json_output=getattr(args, "json_output", False),
        verbosity=args.verbose,
    )

    configure_logging(verbosity=config.verbosity)

    try:
        return _COMMANDS[args.command](args, config)
    except KeyboardInterrupt:
        return 130
    except I18nError as exc:
        print(f"md-i18n: error: {exc}", file=sys.stderr)
        return 1


def _run_validate(args: argparse.Namespace, config: Config) -> int:
    if args.is_dir:
        results = validate_directories(args.source, args.target, args.source_locale, args.target_locale)
        if config.json_output:
            print(render_json(directory_validation_json(results)))
        else:
            print(render_directory_validation(results))
        return 0 if all(result.passed for result in results.values()) else 1

    result = validate_files(args.source, args.target, args.source_locale, args.target_locale)
    if config.json_output:
        print(render_json(result.to_dict()))
    else:
        print(render_validation(result))
    return 0 if result.passed else 1


def _run_diff_sections(args: argparse.Namespace, config: Config) -> int:
    old_text = read_document(args.old)
    new_text = read_document(args.new)
    report = compare_sections(old_text, new_text)

    if config.json_output:
        print(render_json(report.to_dict()))
    elif args.show_diff:
        print(render_section_changes(report, old_text, new_text))
    else:
        print(render_section_changes(report))
    return 0


def _plan_output(config: Config, kind: str) -> Path:
    if config.output:
        return Path(config.output)
    location = resolve_i18n_dir(config.cwd, install_dir=INSTALL_DIR)
    return default_plan_path(kind, location)


def _run_git_sync(args: argparse.Namespace, config: Config) -> int:
    output = _plan_output(config, "git-sync")
    plan = build_git_sync_plan(args.source, args.target, args.ref, cwd=str(config.cwd))
    write_plan(plan, output)
    print(render_git_sync_summary(plan, str(output)))
    return 0


def _run_create_plan(args: argparse.Namespace, config: Config) -> int:
    plan = create_plan(args.source_dir, args.target_dir)
    if args.dry_run:
        print(dump_plan(plan), end="")
        return 0

    output = _plan_output(config, "translation")
    write_plan(plan, output)
    print(render_create_plan_summary(plan, str(output)))
    return 0


def _run_sync_plan(args: argparse.Namespace, config: Config) -> int:
    output = _plan_output(config, "translation")
    plan = sync_plan(args.source_dir, args.target_dir)
    write_plan(plan, output)
    print(render_sync_plan_summary(plan, str(output)))
    return 0


def _run_update_plan(args: argparse.Namespace, config: Config) -> int:
    plan = update_plan_file(Path(args.plan), args.source, args.status, args.notes)
    print(f"Updated: {args.source} -> {args.status}")
    print(plan_progress(plan))
    return 0


def _run_no_translate(args: argparse.Namespace, config: Config) -> int:
    project_dir = Path(args.project_dir) if args.project_dir else config.cwd
    i18n_dir = find_i18n_dir(project_dir)
    if i18n_dir is None:
        print("No .i18n directory found.")
        print(f"Create one at: {project_dir / '.i18n'}")
        return 0

    rules = load_no_translate(i18n_dir)
    if args.format == "json":
        print(render_json(rules.to_dict()))
    else:
        print("\n".join(describe_rules(rules, i18n_dir / NO_TRANSLATE_FILENAME)))
    return 0


_COMMANDS: Dict[str, Callable[[argparse.Namespace, Config], int]] = {
    "validate": _run_validate,
    "diff-sections": _run_diff_sections,
    "git-sync": _run_git_sync,
    "create-plan": _run_create_plan,
    "sync-plan": _run_sync_plan,
    "update-plan": _run_update_plan,
    "no-translate": _run_no_translate,
}


if __name__ == "__main__":  # pragma: no cover - manual invocation
    raise SystemExit(main())
