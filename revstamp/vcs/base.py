"""Abstract VCS backend interface for revstamp."""

from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

from revstamp.errors import VCSCommandError
from revstamp.vcs.models import RevisionState

logger = logging.getLogger(__name__)

# Seconds before a single VCS query is considered hung
COMMAND_TIMEOUT = 30


class VCSBackend(ABC):
    """Reads live revision state from one kind of version-control system.

    Backends are black boxes behind two calls: :meth:`detect` answers whether
    the path is a working copy this backend understands, and
    :meth:`read_state` queries it. Queries are synchronous and never retried.
    """

    name: str = ""

    @abstractmethod
    def detect(self, repo_path: Path) -> bool:
        """Return True if *repo_path* is inside a working copy for this VCS."""
        ...

    @abstractmethod
    def read_state(self, repo_path: Path) -> RevisionState:
        """Query the working copy at *repo_path*.

        Raises:
            VCSCommandError: a query failed inside a detected working copy.
        """
        ...

    # ------------------------------------------------------------------
    # Subprocess helpers
    # ------------------------------------------------------------------

    def _run(self, args: list[str], repo_path: Path) -> str:
        """Run a VCS command and return stripped stdout, raising VCSCommandError."""
        logger.debug("%s: running %s in %s", self.name, " ".join(args), repo_path)
        try:
            result = subprocess.run(
                args,
                cwd=repo_path,
                capture_output=True,
                text=True,
                check=True,
                timeout=COMMAND_TIMEOUT,
            )
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            raise VCSCommandError(
                self.name, args, RuntimeError(stderr or f"exit status {e.returncode}")
            ) from e
        except (OSError, subprocess.TimeoutExpired) as e:
            raise VCSCommandError(self.name, args, e) from e
        return result.stdout.strip()

    def _try_run(self, args: list[str], repo_path: Path) -> str | None:
        """Like :meth:`_run` but returns None when the command exits non-zero.

        Used for queries where failure carries meaning (no tag, detached HEAD).
        A missing binary or a timeout still raises.
        """
        try:
            return self._run(args, repo_path)
        except VCSCommandError as e:
            if isinstance(e.__cause__, subprocess.CalledProcessError):
                return None
            raise

    def _succeeds(self, args: list[str], repo_path: Path) -> str | None:
        """Run a detection command; None if the binary is missing or it fails."""
        try:
            result = subprocess.run(
                args,
                cwd=repo_path,
                capture_output=True,
                text=True,
                timeout=COMMAND_TIMEOUT,
            )
        except FileNotFoundError:
            logger.debug("%s: %s not installed", self.name, args[0])
            return None
        except (OSError, subprocess.TimeoutExpired):
            logger.debug("%s: detection command failed in %s", self.name, repo_path, exc_info=True)
            return None
        if result.returncode != 0:
            return None
        return result.stdout.strip()
