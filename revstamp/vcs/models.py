"""Pydantic models for revision state."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class RevisionState(BaseModel):
    """Snapshot of a repository's revision, produced once per build.

    ``tick`` counts commits since ``tag``; zero means the checkout is exactly
    on the tag. When no tag exists, ``tick`` counts commits since the root.
    """

    model_config = ConfigDict(frozen=True)

    tag: str | None = None
    branch: str
    short_hash: str
    full_hash: str
    tick: int = Field(ge=0)
    num: int = Field(ge=0)
    dirty: bool = False
    vcs_type: str = "git"
    date: str | None = None

    @field_validator("tag", "date")
    @classmethod
    def empty_to_none(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v

    @field_validator("branch", "full_hash", "short_hash", "vcs_type")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("value cannot be empty or whitespace")
        return v

    @model_validator(mode="after")
    def short_hash_is_prefix(self) -> RevisionState:
        if not self.full_hash.startswith(self.short_hash):
            raise ValueError(
                f"short_hash {self.short_hash!r} is not a prefix of full_hash {self.full_hash!r}"
            )
        return self

    @property
    def is_exact_tag(self) -> bool:
        return self.tick == 0


class ProbeResult(BaseModel):
    """A probed state together with where it came from ("git", "hg", "cache")."""

    model_config = ConfigDict(frozen=True)

    state: RevisionState
    source: str

    @property
    def from_cache(self) -> bool:
        return self.source == "cache"
