"""Mercurial backend, shelling out to the ``hg`` binary."""

from __future__ import annotations

from pathlib import Path

from revstamp.vcs.base import VCSBackend
from revstamp.vcs.models import RevisionState


class HgBackend(VCSBackend):
    """Revision state from a Mercurial working copy."""

    name = "hg"

    def detect(self, repo_path: Path) -> bool:
        return bool(self._succeeds(["hg", "root"], repo_path))

    def _template(self, template: str, repo_path: Path, rev: str = ".") -> str:
        return self._run(["hg", "log", "-r", rev, "--template", template], repo_path)

    def read_state(self, repo_path: Path) -> RevisionState:
        full_hash = self._template("{node}", repo_path)
        short_hash = self._template("{node|short}", repo_path)
        branch = self._template("{branch}", repo_path)
        latest = self._template("{latesttag}", repo_path)
        distance = int(self._template("{latesttagdistance}", repo_path))
        # One marker per ancestor of the working directory parent
        num = len(self._template("x", repo_path, rev="::."))
        status = self._run(["hg", "status", "-mard"], repo_path)
        date = self._template("{date|isodatesec}", repo_path)

        tag = None if latest in ("", "null") else latest
        return RevisionState(
            tag=tag,
            branch=branch,
            short_hash=short_hash,
            full_hash=full_hash,
            tick=distance if tag is not None else num,
            num=num,
            dirty=bool(status),
            vcs_type=self.name,
            date=date,
        )
