"""
Configuration model for md-i18n.

The CLI constructs a Config instance and passes it down into the
commands so behavior can be adjusted without relying on global state.
Where generated plans live is decided by resolve_i18n_dir, a pure
function of the working directory, an optional override and the
location md-i18n is installed in.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

I18N_DIRNAME = ".i18n"

# Agent tool directories that md-i18n can be installed into as a
# project-local skill, e.g. <project>/.claude/skills/markdown-i18n.
PROJECT_SKILL_DIRS = (
    ".claude/skills",
    ".cursor/skills",
    ".codex/skills",
    ".gemini/skills",
)

PLAN_FILENAMES = {
    "translation": "translation-plan.yaml",
    "git-sync": "git-sync-plan.yaml",
}

NO_TRANSLATE_FILENAME = "no-translate.yaml"


@dataclass
class Config:
    """
    Top-level configuration for an md-i18n run.
    """

    cwd: Path = field(default_factory=Path.cwd)
    output: Optional[str] = None
    json_output: bool = False
    verbosity: int = 0


@dataclass
class I18nLocation:
    """
    Resolved location of the .i18n state directory.
    """

    i18n_dir: Path
    project_root: Optional[Path] = None
    is_project_install: bool = False


def resolve_i18n_dir(
    cwd: Path,
    override: Optional[Path] = None,
    install_dir: Optional[Path] = None,
    skill_dirs: Sequence[str] = PROJECT_SKILL_DIRS,
) -> I18nLocation:
    """
    Decide which .i18n directory plans and rules belong to.

    An explicit override wins. Otherwise, when md-i18n is installed
    inside a project's skill directory, the .i18n directory sits at that
    project's root. In every other case it is <cwd>/.i18n.
    """

    if override is not None:
        return I18nLocation(i18n_dir=Path(override))

    if install_dir is not None:
        root = project_root_for(Path(install_dir), skill_dirs)
        if root is not None:
            return I18nLocation(
                i18n_dir=root / I18N_DIRNAME,
                project_root=root,
                is_project_install=True,
            )

    return I18nLocation(i18n_dir=Path(cwd) / I18N_DIRNAME)


def project_root_for(install_dir: Path, skill_dirs: Sequence[str] = PROJECT_SKILL_DIRS) -> Optional[Path]:
    """
    Return the project that install_dir belongs to, if it is a skill dir.
    """

    parts = install_dir.parts
    for pattern in skill_dirs:
        pattern_parts = tuple(pattern.split("/"))
        width = len(pattern_parts)
        for i in range(len(parts) - width + 1):
            if parts[i : i + width] == pattern_parts:
                return Path(*parts[:i]) if i else Path(".")
    return None


def default_plan_path(kind: str, location: I18nLocation) -> Path:
    """
    Default file for a plan of the given kind ("translation" or "git-sync").
    """

    try:
        filename = PLAN_FILENAMES[kind]
    except KeyError:
        raise ValueError(f"unknown plan kind: {kind!r}") from None
    return location.i18n_dir / filename


def find_i18n_dir(project_dir: Path) -> Optional[Path]:
    """
    Return <project_dir>/.i18n when it exists as a directory.
    """

    candidate = Path(project_dir) / I18N_DIRNAME
    if candidate.is_dir():
        return candidate
    return None
