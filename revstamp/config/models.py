from typing import Literal

from pydantic import BaseModel, Field


class OutputConfig(BaseModel):
    machine_header: str = "revision.h"
    machine_format: Literal["h", "py", "json", "sh"] = "h"
    display_header: str | None = "revision-display.h"
    display_cache: str | None = None


class RevstampConfig(BaseModel):
    repo_path: str = "."
    cache_path: str | None = ".revstamp.cache"
    backends: list[Literal["git", "hg"]] = Field(default_factory=lambda: ["git", "hg"])
    output: OutputConfig = Field(default_factory=OutputConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
