"""Output subsystem: renders and writes revision artifacts."""

from revstamp.output.emitter import (
    MACHINE_FORMATS,
    emit_display_cache,
    emit_display_header,
    emit_display_snapshot,
    emit_machine_header,
)
from revstamp.output.writer import (
    StagedWrite,
    WriteResult,
    commit_writes,
    stage_write,
    write_all,
    write_always,
    write_if_changed,
)

__all__ = [
    "MACHINE_FORMATS",
    "StagedWrite",
    "WriteResult",
    "commit_writes",
    "emit_display_cache",
    "emit_display_header",
    "emit_display_snapshot",
    "emit_machine_header",
    "stage_write",
    "write_all",
    "write_always",
    "write_if_changed",
]
