"""
Git integration for md-i18n.

This module is responsible for interacting with the git CLI to obtain
the diff of a source document against a reference. Any failure here is
fatal for the calling command, because everything downstream depends on
the diff.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Optional

from .errors import GitError

LOG = logging.getLogger(__name__)


@dataclass
class GitFileDiff:
    """
    Result of diffing one file against a git reference.

    raw_diff is empty when the file has no changes.
    """

    raw_diff: str
    path: str
    ref: str

    @property
    def has_changes(self) -> bool:
        return bool(self.raw_diff.strip())


def _run_git(
    args: list[str],
    cwd: Optional[str] = None,
) -> subprocess.CompletedProcess[str]:
    """
    Run a git command and return the completed process.

    All git invocations go through this helper so that error handling
    and logging are centralized.
    """

    cmd = ["git", *args]
    LOG.debug("Running git command: %s", " ".join(cmd))
    try:
        completed = subprocess.run(
            cmd,
            cwd=cwd,
            check=False,
            text=True,
            encoding="utf-8",
            capture_output=True,
        )
    except OSError as exc:
        raise GitError(f"failed to execute git: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise GitError(f"git output is not valid UTF-8: {' '.join(cmd)} ({exc.reason})") from exc

    if completed.returncode != 0:
        stderr = (completed.stderr or "").strip()
        LOG.debug("git stderr: %s", stderr)
        message = f"git command failed: {' '.join(cmd)}"
        if stderr:
            message = f"{message}\n{stderr}"
        raise GitError(message)

    return completed


def ensure_git_repo(cwd: Optional[str] = None) -> None:
    """
    Raise GitError unless cwd is inside a git work tree.
    """

    try:
        _run_git(["rev-parse", "--git-dir"], cwd=cwd)
    except GitError as exc:
        raise GitError(
            "not in a git repository; run this command from within a git repository"
            f" ({exc})"
        ) from exc


def get_file_diff(path: str, ref: str = "HEAD", cwd: Optional[str] = None) -> GitFileDiff:
    """
    Return the unified diff of the working-tree file against ref.
    """

    diff_output = _run_git(["diff", ref, "--", path], cwd=cwd).stdout
    return GitFileDiff(raw_diff=diff_output, path=path, ref=ref)
