"""Cache snapshot serialization."""

from revstamp.cache.snapshot import (
    REQUIRED_KEYS,
    CacheSnapshot,
    deserialize,
    dump_cache,
    from_snapshot,
    parse_snapshot,
    read_cache,
    render_snapshot,
    serialize,
)

__all__ = [
    "CacheSnapshot",
    "REQUIRED_KEYS",
    "deserialize",
    "dump_cache",
    "from_snapshot",
    "parse_snapshot",
    "read_cache",
    "render_snapshot",
    "serialize",
]
