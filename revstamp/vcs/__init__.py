"""VCS backends for revstamp."""

from revstamp.vcs.base import VCSBackend
from revstamp.vcs.git import GitBackend
from revstamp.vcs.hg import HgBackend
from revstamp.vcs.models import ProbeResult, RevisionState

BACKENDS: dict[str, type[VCSBackend]] = {
    GitBackend.name: GitBackend,
    HgBackend.name: HgBackend,
}


def get_backends(names: list[str] | None = None) -> list[VCSBackend]:
    """Instantiate backends by name, in the given order.

    ``None`` means every known backend, git first.
    """
    if names is None:
        names = list(BACKENDS)
    backends: list[VCSBackend] = []
    for name in names:
        if name not in BACKENDS:
            raise ValueError(
                f"Unsupported VCS backend: {name!r}. "
                f"Known backends: {', '.join(sorted(BACKENDS))}."
            )
        backends.append(BACKENDS[name]())
    return backends


__all__ = [
    "BACKENDS",
    "GitBackend",
    "HgBackend",
    "ProbeResult",
    "RevisionState",
    "VCSBackend",
    "get_backends",
]
