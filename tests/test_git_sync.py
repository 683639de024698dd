import shutil
import subprocess
from pathlib import Path

import pytest

from md_i18n.diff_parser import parse_unified_diff
from md_i18n.errors import DocumentNotFoundError, GitError
from md_i18n.git_adapter import GitFileDiff
from md_i18n.git_sync import build_git_sync_plan, operation_summary
from md_i18n.plans import load_plan, write_plan

GUIDE = "\n".join(
    [
        "# Guide",
        "",
        "Intro text.",
        "",
        "## Install",
        "",
        "Run the installer.",
        "Then restart.",
    ]
)

CANNED_DIFF = "\n".join(
    [
        "diff --git a/docs/en/guide.md b/docs/en/guide.md",
        "index 1111111..2222222 100644",
        "--- a/docs/en/guide.md",
        "+++ b/docs/en/guide.md",
        "@@ -3 +3 @@",
        "-  Intro text.",
        "+Intro text.",
        "@@ -5,3 +5,4 @@",
        " ## Install",
        " ",
        " Run the installer.",
        "+Then restart.",
        "",
    ]
)


def _fake_git(monkeypatch, raw_diff: str):
    monkeypatch.setattr("md_i18n.git_sync.ensure_git_repo", lambda cwd=None: None)
    monkeypatch.setattr(
        "md_i18n.git_sync.get_file_diff",
        lambda path, ref="HEAD", cwd=None: GitFileDiff(raw_diff=raw_diff, path=path, ref=ref),
    )


def test_plan_maps_classified_hunks_to_sections(tmp_path, monkeypatch):
    (tmp_path / "docs" / "en").mkdir(parents=True)
    (tmp_path / "docs" / "en" / "guide.md").write_text(GUIDE, encoding="utf-8")
    _fake_git(monkeypatch, CANNED_DIFF)

    plan = build_git_sync_plan("docs/en/guide.md", "docs/zh/guide.md", cwd=str(tmp_path))

    assert plan["meta"]["type"] == "git-diff-sync"
    assert plan["meta"]["format_version"] == "2.0"
    assert plan["meta"]["status"] == "pending"
    assert plan["summary"] == {
        "has_changes": True,
        "total_hunks": 2,
        "affected_sections": 2,
        "target_exists": False,
        "operations": {"add": 1, "delete": 0, "modify": 0, "format": 1},
    }

    assert [c["operation"] for c in plan["changes"]] == ["format", "add"]
    assert plan["changes"][1]["line_range"] == "Lines 5-8"
    assert plan["changes"][1]["context_lines"] == ["## Install", "", "Run the installer."]

    sections = plan["affected_sections"]
    assert [s["section_title"] for s in sections] == ["Guide", "Install"]
    assert sections[0]["operation_types"] == ["format"]
    assert sections[1]["hunks"] == [
        {"hunk_index": 1, "operation": "add", "description": "Add 1 line(s)"},
    ]
    assert plan["execution"]["steps"][-1].startswith("5. Run validation")


def test_plan_notices_existing_target(tmp_path, monkeypatch):
    for lang in ("en", "zh"):
        (tmp_path / lang).mkdir()
        (tmp_path / lang / "guide.md").write_text(GUIDE, encoding="utf-8")
    _fake_git(monkeypatch, CANNED_DIFF)

    plan = build_git_sync_plan("en/guide.md", "zh/guide.md", cwd=str(tmp_path))

    assert plan["summary"]["target_exists"] is True


def test_empty_diff_gives_completed_plan(tmp_path, monkeypatch):
    _fake_git(monkeypatch, "")

    plan = build_git_sync_plan("docs/en/guide.md", "docs/zh/guide.md", "v1.0", cwd=str(tmp_path))

    assert plan["meta"]["status"] == "completed"
    assert plan["meta"]["git_ref"] == "v1.0"
    assert plan["summary"] == {"has_changes": False, "message": "No changes detected"}
    assert plan["changes"] == []
    assert plan["affected_sections"] == []
    assert plan["execution"] is None


def test_missing_source_with_changes_is_an_error(tmp_path, monkeypatch):
    _fake_git(monkeypatch, CANNED_DIFF)

    try:
        build_git_sync_plan("docs/en/gone.md", "docs/zh/gone.md", cwd=str(tmp_path))
    except DocumentNotFoundError as exc:
        assert "gone.md" in str(exc)
    else:
        raise AssertionError("expected DocumentNotFoundError to be raised")


def test_git_failure_propagates(tmp_path, monkeypatch):
    def not_a_repo(cwd=None):
        raise GitError("not in a git repository")

    monkeypatch.setattr("md_i18n.git_sync.ensure_git_repo", not_a_repo)

    try:
        build_git_sync_plan("a.md", "b.md", cwd=str(tmp_path))
    except GitError as exc:
        assert "not in a git repository" in str(exc)
    else:
        raise AssertionError("expected GitError to be raised")


def test_operation_summary_ignores_unclassified_hunks():
    assert operation_summary(parse_unified_diff(CANNED_DIFF)) == {
        "add": 0,
        "delete": 0,
        "modify": 0,
        "format": 0,
    }


def _git(args, cwd: Path) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        text=True,
        capture_output=True,
        check=True,
    )


@pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")
def test_plan_from_real_repository(tmp_path):
    repo = tmp_path / "repo"
    source = repo / "docs" / "en" / "guide.md"
    source.parent.mkdir(parents=True)

    _git(["init"], cwd=repo)
    _git(["config", "user.name", "md-i18n"], cwd=repo)
    _git(["config", "user.email", "md-i18n@example.com"], cwd=repo)

    source.write_text("# Guide\n\nIntro text.\n\n## Install\n\nRun the installer.\n", encoding="utf-8")
    _git(["add", "."], cwd=repo)
    _git(["commit", "-m", "initial docs"], cwd=repo)

    plan = build_git_sync_plan("docs/en/guide.md", "docs/zh/guide.md", cwd=str(repo))
    assert plan["summary"]["has_changes"] is False

    source.write_text(GUIDE + "\n", encoding="utf-8")
    plan = build_git_sync_plan("docs/en/guide.md", "docs/zh/guide.md", cwd=str(repo))

    assert plan["summary"]["has_changes"] is True
    assert plan["summary"]["operations"]["add"] == 1
    assert [s["section_title"] for s in plan["affected_sections"]] == ["Install"]

    out = write_plan(plan, repo / ".i18n" / "git-sync-plan.yaml")
    assert load_plan(out)["changes"][0]["added_lines"] == ["Then restart."]


def test_badly_encoded_source_is_still_planned(tmp_path, monkeypatch):
    source = tmp_path / "docs" / "en" / "guide.md"
    source.parent.mkdir(parents=True)
    source.write_bytes(GUIDE.replace("Intro text.", "Intro \xff.").encode("latin-1"))
    _fake_git(monkeypatch, CANNED_DIFF)

    plan = build_git_sync_plan("docs/en/guide.md", "docs/zh/guide.md", cwd=str(tmp_path))

    assert [s["section_title"] for s in plan["affected_sections"]] == ["Guide", "Install"]
