"""Human-facing tag and branch strings.

Raw tracking-branch names and release tags read poorly in an About box or a
crash report. These rules only ever produce a DisplayState; the
RevisionState they read from is never altered.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from revstamp.errors import InconsistentStateError
from revstamp.vcs.models import RevisionState

TAG_PREFIXES = ("v/", "v")
TAG_SUFFIXES = (
    ("_beta", " Beta "),
    ("_rc", " RC "),
)


class DisplayState(BaseModel):
    """Display values derived from a RevisionState. Never persisted as truth."""

    model_config = ConfigDict(frozen=True)

    display_tag: str
    display_branch: str


def prettify_branch(branch: str) -> str:
    """``remotes/origin/master`` -> ``remote/origin/Master``."""
    branch = branch.replace("remotes/", "remote/")
    return "/".join("Master" if part == "master" else part for part in branch.split("/"))


def prettify_tag(tag: str) -> str:
    """``v1.0`` -> ``1.0``, ``v/2.3`` -> ``2.3``, ``1.0_beta6`` -> ``1.0 Beta 6``.

    Only the first matching prefix is stripped; suffix codes are expanded
    after the prefix is gone.
    """
    for prefix in TAG_PREFIXES:
        if tag.startswith(prefix):
            tag = tag[len(prefix):]
            break
    for code, text in TAG_SUFFIXES:
        tag = tag.replace(code, text)
    return tag.rstrip()


def normalize(state: RevisionState) -> DisplayState:
    """Compute the display view of *state*.

    Off a tag, the prettified branch stands in for the tag. Exactly on a tag,
    the prettified tag is shown and the branch is kept as is.

    Raises:
        InconsistentStateError: ``tick == 0`` but there is no tag.
    """
    if state.is_exact_tag:
        if state.tag is None:
            raise InconsistentStateError(state)
        return DisplayState(display_tag=prettify_tag(state.tag), display_branch=state.branch)

    branch = prettify_branch(state.branch)
    return DisplayState(display_tag=branch, display_branch=branch)
