"""Find the revision state of a build: live repository first, cache second."""

from __future__ import annotations

import logging
from pathlib import Path

from revstamp.cache import read_cache
from revstamp.errors import NoRepositoryError
from revstamp.vcs import VCSBackend, get_backends
from revstamp.vcs.models import ProbeResult, RevisionState

logger = logging.getLogger(__name__)


def detect_backend(repo_path: Path, backends: list[VCSBackend]) -> VCSBackend | None:
    """Return the first backend that recognises *repo_path*, if any."""
    for backend in backends:
        if backend.detect(repo_path):
            logger.debug("detected %s working copy at %s", backend.name, repo_path)
            return backend
    return None


def probe_with_source(
    repo_path: str | Path,
    cache_path: str | Path | None = None,
    backends: list[VCSBackend] | None = None,
) -> ProbeResult:
    """Probe *repo_path* and report whether the state came from a VCS or the cache.

    Falls back to the cache only when no backend detects a working copy. A
    VCS query that fails inside a detected working copy is not masked by the
    cache; the VCSCommandError propagates.
    """
    repo_path = Path(repo_path)
    if backends is None:
        backends = get_backends()

    backend = detect_backend(repo_path, backends)
    if backend is not None:
        state = backend.read_state(repo_path)
        logger.debug("probed %s: %s", backend.name, state)
        return ProbeResult(state=state, source=backend.name)

    if cache_path is not None and Path(cache_path).is_file():
        logger.info("no repository at %s, using cache %s", repo_path, cache_path)
        return ProbeResult(state=read_cache(cache_path), source="cache")

    raise NoRepositoryError(repo_path, cache_path)


def probe(
    repo_path: str | Path,
    cache_path: str | Path | None = None,
    backends: list[VCSBackend] | None = None,
) -> RevisionState:
    """Return the RevisionState for *repo_path*.

    Raises:
        NoRepositoryError: no backend detects a working copy and there is no cache.
        MalformedCacheError: the fallback cache cannot be parsed.
        VCSCommandError: a query failed inside a detected working copy.
    """
    return probe_with_source(repo_path, cache_path, backends).state
