"""Shell-sourceable cache of a RevisionState.

The cache is committed to the source tree so that builds from an archive,
which carry no VCS history, still stamp the same revision. Each line is
``key=value`` with the value shell-quoted::

    vcsType=git
    tag=v1.0
    branch=master
    ...
"""

from __future__ import annotations

import logging
import re
import shlex
from pathlib import Path

from pydantic import ValidationError

from revstamp.errors import MalformedCacheError
from revstamp.vcs.models import RevisionState

logger = logging.getLogger(__name__)

CacheSnapshot = dict[str, str]

# RevisionState field -> cache key, in the order keys are written
FIELD_KEYS: dict[str, str] = {
    "vcs_type": "vcsType",
    "tag": "tag",
    "branch": "branch",
    "short_hash": "shortHash",
    "full_hash": "fullHash",
    "tick": "tick",
    "num": "num",
    "dirty": "dirty",
    "date": "date",
}

REQUIRED_KEYS = ("tag", "branch", "shortHash", "fullHash", "tick", "num", "dirty")

CACHE_HEADER = (
    "# Generated by revstamp. Do not edit.\n"
    "# Commit this file so builds without VCS access stamp the same revision.\n"
)

_KEY_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_TRUE = {"1", "true", "yes"}
_FALSE = {"0", "false", "no"}


def serialize(state: RevisionState) -> CacheSnapshot:
    """Map a RevisionState to cache keys. Pure and deterministic."""
    snapshot: CacheSnapshot = {}
    for field, key in FIELD_KEYS.items():
        value = getattr(state, field)
        if value is None:
            snapshot[key] = ""
        elif isinstance(value, bool):
            snapshot[key] = "1" if value else "0"
        else:
            snapshot[key] = str(value)
    return snapshot


def render_snapshot(snapshot: CacheSnapshot, header: str = CACHE_HEADER) -> bytes:
    """Render a snapshot as shell-sourceable text below the *header* comment.

    Known keys come first in their canonical order, any others follow sorted,
    so equal snapshots always render to equal bytes.
    """
    known = [k for k in FIELD_KEYS.values() if k in snapshot]
    extra = sorted(k for k in snapshot if k not in FIELD_KEYS.values())
    lines = [f"{key}={shlex.quote(snapshot[key])}" for key in known + extra]
    return (header + "\n" + "\n".join(lines) + "\n").encode("utf-8")


def parse_snapshot(data: bytes | str, path: Path | str | None = None) -> CacheSnapshot:
    """Parse ``key=value`` lines back into a snapshot.

    Blank lines and ``#`` comments are skipped; a repeated key keeps its last
    value, as sourcing the file in a shell would.
    """
    if isinstance(data, bytes):
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedCacheError(f"not valid UTF-8: {e}", path) from e
    else:
        text = data

    snapshot: CacheSnapshot = {}
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            raise MalformedCacheError(f"line {lineno}: expected key=value, got {raw!r}", path)
        if not _KEY_RE.fullmatch(key):
            raise MalformedCacheError(f"line {lineno}: invalid key {key!r}", path)
        try:
            words = shlex.split(value)
        except ValueError as e:
            raise MalformedCacheError(f"line {lineno}: {e}", path) from e
        if len(words) > 1:
            raise MalformedCacheError(
                f"line {lineno}: unquoted whitespace in value of {key}", path
            )
        snapshot[key] = words[0] if words else ""
    return snapshot


def _parse_bool(key: str, value: str, path: Path | str | None) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise MalformedCacheError(f"{key} must be 0 or 1, got {value!r}", path)


def _parse_int(key: str, value: str, path: Path | str | None) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise MalformedCacheError(f"{key} must be an integer, got {value!r}", path) from e


def from_snapshot(snapshot: CacheSnapshot, path: Path | str | None = None) -> RevisionState:
    """Build a RevisionState from a parsed snapshot."""
    missing = [k for k in REQUIRED_KEYS if k not in snapshot]
    if missing:
        raise MalformedCacheError(f"missing required keys: {', '.join(missing)}", path)

    unknown = sorted(set(snapshot) - set(FIELD_KEYS.values()))
    if unknown:
        logger.debug("ignoring unknown cache keys: %s", ", ".join(unknown))

    try:
        return RevisionState(
            tag=snapshot["tag"],
            branch=snapshot["branch"],
            short_hash=snapshot["shortHash"],
            full_hash=snapshot["fullHash"],
            tick=_parse_int("tick", snapshot["tick"], path),
            num=_parse_int("num", snapshot["num"], path),
            dirty=_parse_bool("dirty", snapshot["dirty"], path),
            vcs_type=snapshot.get("vcsType") or "git",
            date=snapshot.get("date"),
        )
    except ValidationError as e:
        raise MalformedCacheError(str(e), path) from e


def deserialize(data: bytes | str, path: Path | str | None = None) -> RevisionState:
    """Parse cache file content into a RevisionState.

    Raises:
        MalformedCacheError: unparsable lines, missing keys or invalid values.
    """
    return from_snapshot(parse_snapshot(data, path), path)


def dump_cache(state: RevisionState) -> bytes:
    """Cache file content for *state*."""
    return render_snapshot(serialize(state))


def read_cache(path: str | Path) -> RevisionState:
    """Read and deserialize the cache file at *path*."""
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise MalformedCacheError(f"cannot read cache: {e}", path) from e
    return deserialize(data, path)
