"""Render revision state into build artifacts.

Every function here is pure: the same input always yields the same bytes,
so the change-gated writer can compare against what is already on disk.
"""

from __future__ import annotations

import json
from collections.abc import Callable

from revstamp.cache.snapshot import FIELD_KEYS, CacheSnapshot, render_snapshot, serialize
from revstamp.display.normalizer import DisplayState
from revstamp.vcs.models import RevisionState

GENERATED_NOTICE = "Generated by revstamp. Do not edit."

# Shell-format build outputs are not meant to be committed like the cache
SH_HEADER = f"# {GENERATED_NOTICE}\n"

# (preprocessor symbol, RevisionState field), in emission order
SYMBOLS: tuple[tuple[str, str], ...] = (
    ("VCS_TYPE", "vcs_type"),
    ("VCS_NUM", "num"),
    ("VCS_DATE", "date"),
    ("VCS_BRANCH", "branch"),
    ("VCS_TAG", "tag"),
    ("VCS_TICK", "tick"),
    ("VCS_SHORT_HASH", "short_hash"),
    ("VCS_FULL_HASH", "full_hash"),
    ("VCS_WC_MODIFIED", "dirty"),
)

FIELD_SYMBOLS = {field: symbol for symbol, field in SYMBOLS}


def _c_string(value: str | None) -> str:
    escaped = (value or "").replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _c_value(value: object) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(value)
    return _c_string(None if value is None else str(value))


def _render_c(state: RevisionState) -> str:
    lines = [
        f"/* {GENERATED_NOTICE} */",
        "",
        "#ifndef REVSTAMP_REVISION_H",
        "#define REVSTAMP_REVISION_H",
        "",
    ]
    for symbol, field in SYMBOLS:
        lines.append(f"#define {symbol} {_c_value(getattr(state, field))}")
    lines += ["", "#endif /* REVSTAMP_REVISION_H */", ""]
    return "\n".join(lines)


def _render_py(state: RevisionState) -> str:
    lines = [f"# {GENERATED_NOTICE}", ""]
    for symbol, field in SYMBOLS:
        lines.append(f"{symbol} = {getattr(state, field)!r}")
    lines.append("")
    return "\n".join(lines)


def _render_json(state: RevisionState) -> str:
    data = {symbol: getattr(state, field) for symbol, field in SYMBOLS}
    return json.dumps(data, indent=2, sort_keys=True) + "\n"


def _render_sh(state: RevisionState) -> str:
    return render_snapshot(serialize(state), header=SH_HEADER).decode("utf-8")


MACHINE_FORMATS: dict[str, Callable[[RevisionState], str]] = {
    "h": _render_c,
    "py": _render_py,
    "json": _render_json,
    "sh": _render_sh,
}


def emit_machine_header(state: RevisionState, fmt: str = "h") -> bytes:
    """Constants for program source, built from raw (unprettified) fields."""
    try:
        render = MACHINE_FORMATS[fmt]
    except KeyError:
        raise ValueError(
            f"Unsupported machine header format: {fmt!r}. "
            f"Choose one of: {', '.join(MACHINE_FORMATS)}."
        ) from None
    return render(state).encode("utf-8")


def emit_display_snapshot(state: RevisionState, display: DisplayState) -> CacheSnapshot:
    """The cache snapshot with tag and branch swapped for their display forms."""
    snapshot = serialize(state)
    snapshot["tag"] = display.display_tag
    snapshot["branch"] = display.display_branch
    return snapshot


def emit_display_cache(display_snapshot: CacheSnapshot) -> bytes:
    """The display snapshot in shell-sourceable cache syntax."""
    return render_snapshot(display_snapshot, header=SH_HEADER)


def emit_display_header(display_snapshot: CacheSnapshot) -> bytes:
    """``#define VCS_*`` lines with bare values for an Info.plist preprocessor.

    The plist itself carries the ``VCS_*`` tokens; a later preprocessing pass
    substitutes them, so values are deliberately left unquoted.
    """
    lines = [f"/* {GENERATED_NOTICE} */", ""]
    for symbol, field in SYMBOLS:
        key = FIELD_KEYS[field]
        if key in display_snapshot:
            lines.append(f"#define {symbol} {display_snapshot[key]}".rstrip())
    lines.append("")
    return "\n".join(lines).encode("utf-8")
