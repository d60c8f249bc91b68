"""Artifact writers.

Downstream build steps rebuild whatever depends on a file whose mtime moved,
so the machine header is only rewritten when its bytes actually change.

Writes happen in two steps. :func:`stage_write` puts the new content in a
temporary file beside the target, and :func:`commit_writes` moves every
staged file into place with ``os.replace``. :func:`write_all` stages a whole
batch before committing any of it, so a target that cannot be written leaves
the other targets as they were.
"""

from __future__ import annotations

import errno
import logging
import os
import stat
import tempfile
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from revstamp.errors import ArtifactWriteError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WriteResult:
    """Outcome of writing one artifact."""

    path: Path
    written: bool


@dataclass(frozen=True)
class StagedWrite:
    """New content for *path*, waiting in *tmp_path* to be moved into place.

    ``tmp_path`` is None when the gated compare found nothing to write.
    """

    path: Path
    tmp_path: Path | None = None
    size: int = 0


def _new_file_mode() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def _target_mode(path: Path) -> int:
    """Mode to give the replacement: the existing file's, else the umask default."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        return _new_file_mode()


def stage_write(path: str | Path, content: bytes, gated: bool = True) -> StagedWrite:
    """Write *content* to a temp file next to *path* without touching *path*.

    With *gated*, a target that already holds exactly *content* is left alone
    and nothing is staged.

    Raises:
        ArtifactWriteError: the target is a directory or the temp file
            cannot be created.
    """
    path = Path(path)
    try:
        if path.is_dir():
            raise IsADirectoryError(errno.EISDIR, os.strerror(errno.EISDIR), str(path))
        if gated and path.is_file() and path.read_bytes() == content:
            logger.debug("unchanged, not rewriting %s", path)
            return StagedWrite(path=path)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(content)
            # mkstemp creates 0600 files
            os.chmod(tmp_name, _target_mode(path))
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as e:
        raise ArtifactWriteError(path, e) from e
    return StagedWrite(path=path, tmp_path=Path(tmp_name), size=len(content))


def discard_writes(staged: Iterable[StagedWrite]) -> None:
    """Remove any temp files that were staged but not committed."""
    for item in staged:
        if item.tmp_path is not None:
            item.tmp_path.unlink(missing_ok=True)


def commit_writes(staged: list[StagedWrite]) -> list[WriteResult]:
    """Move each staged temp file over its target, in order."""
    results: list[WriteResult] = []
    try:
        for item in staged:
            if item.tmp_path is None:
                results.append(WriteResult(path=item.path, written=False))
                continue
            try:
                os.replace(item.tmp_path, item.path)
            except OSError as e:
                raise ArtifactWriteError(item.path, e) from e
            logger.info("wrote %s (%d bytes)", item.path, item.size)
            results.append(WriteResult(path=item.path, written=True))
    except BaseException:
        discard_writes(staged)
        raise
    return results


def write_all(items: Iterable[tuple[str | Path, bytes, bool]]) -> list[WriteResult]:
    """Write ``(path, content, gated)`` triples as one batch.

    Every item is staged before any target is replaced. If staging fails
    part way through, the temp files already created are removed and no
    target is modified.
    """
    staged: list[StagedWrite] = []
    try:
        for path, content, gated in items:
            staged.append(stage_write(path, content, gated))
    except BaseException:
        discard_writes(staged)
        raise
    return commit_writes(staged)


def write_if_changed(path: str | Path, content: bytes) -> WriteResult:
    """Write *content* to *path* unless the file already holds exactly those bytes."""
    return write_all([(path, content, True)])[0]


def write_always(path: str | Path, content: bytes) -> WriteResult:
    """Write *content* to *path* unconditionally."""
    return write_all([(path, content, False)])[0]
