"""Git backend, shelling out to the ``git`` binary."""

from __future__ import annotations

import re
from pathlib import Path

from revstamp.vcs.base import VCSBackend
from revstamp.vcs.models import RevisionState

# name-rev decorations such as "master~3" or "v1.0^0"
_REV_SUFFIX_RE = re.compile(r"[~^].*$")


def _clean_ref_name(name: str) -> str:
    """Turn a name-rev result into a branch-like name.

    ``refs/heads/topic`` becomes ``topic`` and ``refs/remotes/origin/master``
    becomes ``remotes/origin/master``.
    """
    name = _REV_SUFFIX_RE.sub("", name)
    if name.startswith("refs/heads/"):
        return name[len("refs/heads/"):]
    if name.startswith("refs/"):
        return name[len("refs/"):]
    return name


class GitBackend(VCSBackend):
    """Revision state from a Git working tree."""

    name = "git"

    def detect(self, repo_path: Path) -> bool:
        out = self._succeeds(["git", "rev-parse", "--is-inside-work-tree"], repo_path)
        return out == "true"

    def read_state(self, repo_path: Path) -> RevisionState:
        full_hash = self._run(["git", "rev-parse", "HEAD"], repo_path)
        short_hash = self._run(["git", "rev-parse", "--short", "HEAD"], repo_path)
        branch = self._branch(repo_path)

        tag = self._try_run(["git", "describe", "--tags", "--abbrev=0"], repo_path) or None
        num = int(self._run(["git", "rev-list", "--count", "HEAD"], repo_path))
        if tag is None:
            tick = num
        else:
            tick = int(
                self._run(["git", "rev-list", "--count", f"refs/tags/{tag}..HEAD"], repo_path)
            )

        status = self._run(
            ["git", "status", "--porcelain", "--untracked-files=no"], repo_path
        )
        date = self._run(["git", "log", "-1", "--format=%cI"], repo_path)

        return RevisionState(
            tag=tag,
            branch=branch,
            short_hash=short_hash,
            full_hash=full_hash,
            tick=tick,
            num=num,
            dirty=bool(status),
            vcs_type=self.name,
            date=date,
        )

    def _branch(self, repo_path: Path) -> str:
        """Current branch, or the nearest ref name for a detached HEAD."""
        branch = self._try_run(["git", "symbolic-ref", "--short", "-q", "HEAD"], repo_path)
        if branch:
            return branch
        name = self._try_run(
            ["git", "name-rev", "--name-only", "--no-undefined", "HEAD"], repo_path
        )
        if name:
            return _clean_ref_name(name)
        return "HEAD"
