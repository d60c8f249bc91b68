"""The build step: probe, normalize, render, then write.

Everything that can fail for reasons other than I/O (probing, a malformed
cache, an inconsistent state) happens before the first byte is written, so a
failed run leaves the previous run's artifacts as they were. The artifacts are
then written as one batch: all of them are staged before any is replaced.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from revstamp.cache import dump_cache
from revstamp.config.models import RevstampConfig
from revstamp.display import DisplayState, normalize
from revstamp.errors import NoRepositoryError
from revstamp.output import (
    WriteResult,
    emit_display_cache,
    emit_display_header,
    emit_display_snapshot,
    emit_machine_header,
    write_all,
    write_if_changed,
)
from revstamp.probe import detect_backend, probe_with_source
from revstamp.vcs import RevisionState, get_backends

logger = logging.getLogger(__name__)


@dataclass
class GenerateResult:
    """What a pipeline run produced."""

    state: RevisionState
    display: DisplayState
    source: str
    writes: dict[str, WriteResult] = field(default_factory=dict)

    @property
    def written(self) -> list[Path]:
        return [w.path for w in self.writes.values() if w.written]


def resolve_path(repo_path: Path, path: str | None) -> Path | None:
    """Resolve a configured path against the repository root."""
    if path is None:
        return None
    p = Path(path)
    return p if p.is_absolute() else repo_path / p


def generate(config: RevstampConfig) -> GenerateResult:
    """Run the whole pipeline for *config*.

    The cache is refreshed (change-gated) only when the state came from a
    live repository; when it came from the cache it is read-only. The machine
    header is change-gated; display artifacts are always rewritten.
    """
    repo_path = Path(config.repo_path)
    cache_path = resolve_path(repo_path, config.cache_path)
    machine_path = resolve_path(repo_path, config.output.machine_header)
    display_header_path = resolve_path(repo_path, config.output.display_header)
    display_cache_path = resolve_path(repo_path, config.output.display_cache)

    probed = probe_with_source(repo_path, cache_path, get_backends(list(config.backends)))
    state = probed.state
    display = normalize(state)

    # (artifact, path, content, gated) in write order
    planned: list[tuple[str, Path, bytes, bool]] = []
    if cache_path is not None and not probed.from_cache:
        planned.append(("cache", cache_path, dump_cache(state), True))
    machine_header = emit_machine_header(state, config.output.machine_format)
    planned.append(("machine_header", machine_path, machine_header, True))

    display_snapshot = emit_display_snapshot(state, display)
    if display_cache_path is not None:
        planned.append(
            ("display_cache", display_cache_path, emit_display_cache(display_snapshot), False)
        )
    if display_header_path is not None:
        planned.append(
            ("display_header", display_header_path, emit_display_header(display_snapshot), False)
        )

    writes = write_all((path, content, gated) for _, path, content, gated in planned)
    result = GenerateResult(
        state=state,
        display=display,
        source=probed.source,
        writes={artifact: w for (artifact, *_), w in zip(planned, writes)},
    )

    logger.info(
        "stamped %s (%s, display %r) from %s",
        state.short_hash,
        state.branch,
        display.display_tag,
        probed.source,
    )
    return result


def freeze(config: RevstampConfig) -> WriteResult:
    """Write the cache from the live repository, ignoring any existing cache.

    Raises:
        NoRepositoryError: no backend recognises ``repo_path``.
        InconsistentStateError: the state could never be displayed, so a
            build from the frozen cache would fail.
        ValueError: ``cache_path`` is not configured.
    """
    repo_path = Path(config.repo_path)
    cache_path = resolve_path(repo_path, config.cache_path)
    if cache_path is None:
        raise ValueError("cache_path is not configured; nothing to freeze into")

    backend = detect_backend(repo_path, get_backends(list(config.backends)))
    if backend is None:
        raise NoRepositoryError(repo_path)
    state = backend.read_state(repo_path)
    normalize(state)
    return write_if_changed(cache_path, dump_cache(state))
