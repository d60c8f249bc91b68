"""Exception hierarchy for revstamp.

Every failure aborts the whole run; nothing here is retried. The CLI is the
only place that catches :class:`RevstampError`.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from revstamp.vcs.models import RevisionState


class RevstampError(Exception):
    """Base class for all revstamp failures."""


class NoRepositoryError(RevstampError):
    """No VCS backend recognised the path and no cache file exists."""

    def __init__(self, repo_path: Path | str, cache_path: Path | str | None = None) -> None:
        self.repo_path = Path(repo_path)
        self.cache_path = Path(cache_path) if cache_path is not None else None
        if self.cache_path is None:
            msg = f"No repository found at {self.repo_path} and no cache file configured"
        else:
            msg = (
                f"No repository found at {self.repo_path} "
                f"and no cache file at {self.cache_path}"
            )
        super().__init__(msg)


class MalformedCacheError(RevstampError):
    """A cache file exists but cannot be turned back into a RevisionState."""

    def __init__(self, reason: str, path: Path | str | None = None) -> None:
        self.reason = reason
        self.path = Path(path) if path is not None else None
        where = f" in {self.path}" if self.path is not None else ""
        super().__init__(f"Malformed revision cache{where}: {reason}")


class InconsistentStateError(RevstampError):
    """The state claims an exact tag checkout (tick == 0) but has no tag."""

    def __init__(self, state: RevisionState) -> None:
        self.state = state
        super().__init__(
            f"Revision {state.short_hash} on {state.branch!r} reports tick=0 "
            "but no tag; cannot be exactly on a non-existent tag"
        )


class VCSCommandError(RevstampError):
    """A VCS query failed inside a repository that the backend detected."""

    def __init__(self, backend: str, command: list[str], cause: Exception) -> None:
        self.backend = backend
        self.command = command
        super().__init__(f"{backend} command {' '.join(command)!r} failed: {cause}")
        self.__cause__ = cause


class ArtifactWriteError(RevstampError):
    """Writing a generated artifact failed."""

    def __init__(self, path: Path | str, cause: Exception) -> None:
        self.path = Path(path)
        super().__init__(f"Failed to write {self.path}: {cause}")
        self.__cause__ = cause
