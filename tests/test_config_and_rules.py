from pathlib import Path

from md_i18n.config import (
    I18N_DIRNAME,
    default_plan_path,
    find_i18n_dir,
    project_root_for,
    resolve_i18n_dir,
)
from md_i18n.errors import ConfigError
from md_i18n.no_translate import (
    NoTranslateRules,
    describe_rules,
    load_no_translate,
    should_not_translate,
)

RULES_YAML = """\
headings:
  - text: "API Reference"
    reason: "Product name"
  - pattern: "^v\\\\d+\\\\."
    reason: "Version headings"
terms:
  - text: "Kubernetes"
    reason: "Brand"
sections:
  - title: "Changelog"
    reason: "Generated"
urls:
  - pattern: "https://github.com/*"
    reason: "External"
"""


def test_resolve_i18n_dir_defaults_to_cwd(tmp_path):
    location = resolve_i18n_dir(tmp_path, install_dir=tmp_path / "site-packages" / "md_i18n")

    assert location.i18n_dir == tmp_path / I18N_DIRNAME
    assert location.is_project_install is False
    assert location.project_root is None


def test_resolve_i18n_dir_for_project_skill_install(tmp_path):
    project = tmp_path / "project"
    install = project / ".claude" / "skills" / "markdown-i18n"

    location = resolve_i18n_dir(tmp_path / "elsewhere", install_dir=install)

    assert location.is_project_install is True
    assert location.project_root == project
    assert location.i18n_dir == project / ".i18n"


def test_resolve_i18n_dir_override_wins(tmp_path):
    install = tmp_path / ".cursor" / "skills" / "markdown-i18n"

    location = resolve_i18n_dir(tmp_path, override=tmp_path / "state", install_dir=install)

    assert location.i18n_dir == tmp_path / "state"
    assert location.is_project_install is False


def test_project_root_for_relative_install_dir():
    assert project_root_for(Path(".codex/skills/markdown-i18n")) == Path(".")
    assert project_root_for(Path("home/me/skills/markdown-i18n")) is None


def test_default_plan_path(tmp_path):
    location = resolve_i18n_dir(tmp_path)

    assert default_plan_path("translation", location) == tmp_path / ".i18n" / "translation-plan.yaml"
    assert default_plan_path("git-sync", location) == tmp_path / ".i18n" / "git-sync-plan.yaml"

    try:
        default_plan_path("weekly", location)
    except ValueError as exc:
        assert "weekly" in str(exc)
    else:
        raise AssertionError("expected ValueError for an unknown plan kind")


def test_find_i18n_dir(tmp_path):
    assert find_i18n_dir(tmp_path) is None

    (tmp_path / ".i18n").mkdir()
    assert find_i18n_dir(tmp_path) == tmp_path / ".i18n"


def _rules_dir(tmp_path: Path, text: str) -> Path:
    i18n_dir = tmp_path / ".i18n"
    i18n_dir.mkdir()
    (i18n_dir / "no-translate.yaml").write_text(text, encoding="utf-8")
    return i18n_dir


def test_load_no_translate_missing_file_gives_empty_rules(tmp_path):
    rules = load_no_translate(tmp_path)
    assert rules == NoTranslateRules()
    assert rules.to_dict() == {"headings": [], "terms": [], "sections": [], "urls": []}


def test_load_and_match_rules(tmp_path):
    rules = load_no_translate(_rules_dir(tmp_path, RULES_YAML))

    assert len(rules.headings) == 2
    assert rules.urls[0]["pattern"] == "https://github.com/*"

    decision = should_not_translate("  API Reference ", "heading", rules)
    assert decision.skip is True
    assert decision.reason == "Product name"

    assert should_not_translate("v2.1 release", "heading", rules).reason == "Version headings"
    assert should_not_translate("Getting Started", "heading", rules).skip is False
    assert should_not_translate("Kubernetes", "term", rules).skip is True
    assert should_not_translate("kubernetes", "term", rules).skip is False
    assert should_not_translate("Changelog", "section", rules).skip is True
    assert should_not_translate("Changelog", "heading", rules).skip is False
    assert should_not_translate("anything", "heading", None).skip is False


def test_invalid_heading_pattern_is_ignored():
    rules = NoTranslateRules(headings=[{"pattern": "([unclosed", "reason": "bad"}])
    assert should_not_translate("([unclosed", "heading", rules).skip is False


def test_load_no_translate_rejects_bad_files(tmp_path):
    for index, text in enumerate(["headings: [unclosed\n", "- just\n- a list\n", "terms: Kubernetes\n"]):
        i18n_dir = tmp_path / str(index)
        i18n_dir.mkdir()
        (i18n_dir / "no-translate.yaml").write_text(text, encoding="utf-8")

        try:
            load_no_translate(i18n_dir)
        except ConfigError:
            pass
        else:
            raise AssertionError(f"expected ConfigError for {text!r}")


def test_empty_rules_file_is_allowed(tmp_path):
    assert load_no_translate(_rules_dir(tmp_path, "")) == NoTranslateRules()


def test_describe_rules_lists_each_entry(tmp_path):
    i18n_dir = _rules_dir(tmp_path, RULES_YAML)
    rules = load_no_translate(i18n_dir)

    lines = describe_rules(rules, i18n_dir / "no-translate.yaml")

    assert lines[0].startswith("No-Translate Configuration:")
    assert '  "API Reference" - Product name' in lines
    assert '  Pattern: "^v\\d+\\." - Version headings' in lines
    assert '  "Kubernetes" - Brand (global)' in lines
    assert '  "Changelog" - Generated' in lines
    assert "  https://github.com/* - External" in lines
