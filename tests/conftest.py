"""Shared test fixtures for revstamp."""

from pathlib import Path

import pytest

from revstamp.config.models import OutputConfig, RevstampConfig
from revstamp.vcs.base import VCSBackend
from revstamp.vcs.models import RevisionState

FULL_HASH = "3f2a9c1e7b4d8f60a1b2c3d4e5f60718293a4b5c"


class FakeBackend(VCSBackend):
    """Backend that always detects and returns a fixed state."""

    name = "fake"

    def __init__(self, state: RevisionState, detected: bool = True) -> None:
        self.state = state
        self.detected = detected
        self.reads = 0

    def detect(self, repo_path: Path) -> bool:
        return self.detected

    def read_state(self, repo_path: Path) -> RevisionState:
        self.reads += 1
        return self.state


@pytest.fixture
def tagged_state():
    """Exactly on a release tag."""
    return RevisionState(
        tag="v1.0_beta6",
        branch="master",
        short_hash=FULL_HASH[:7],
        full_hash=FULL_HASH,
        tick=0,
        num=42,
        dirty=False,
        date="2024-05-01T12:00:00+00:00",
    )


@pytest.fixture
def branch_state():
    """Three commits past the last tag on a remote-tracking checkout."""
    return RevisionState(
        tag="v1.0",
        branch="remotes/origin/master",
        short_hash=FULL_HASH[:7],
        full_hash=FULL_HASH,
        tick=3,
        num=45,
        dirty=True,
    )


@pytest.fixture
def untagged_state():
    return RevisionState(
        tag=None,
        branch="feature/login",
        short_hash=FULL_HASH[:10],
        full_hash=FULL_HASH,
        tick=7,
        num=7,
    )


@pytest.fixture
def sample_config(tmp_path):
    return RevstampConfig(
        repo_path=str(tmp_path),
        cache_path=".revstamp.cache",
        output=OutputConfig(
            machine_header="build/revision.h",
            display_header="build/revision-display.h",
            display_cache="build/revision-display.cache",
        ),
    )


@pytest.fixture
def fake_backend():
    """Build backends that report a fixed state without running any VCS tool.

    Call as ``fake_backend(state)`` or ``fake_backend(state, detected=False)``.
    """
    return FakeBackend


@pytest.fixture
def use_backend(monkeypatch):
    """Route the pipeline and CLI to the given backends instead of real VCS tools."""

    def _use(*backends: VCSBackend) -> None:
        monkeypatch.setattr("revstamp.pipeline.get_backends", lambda names=None: list(backends))
        monkeypatch.setattr("revstamp.cli.get_backends", lambda names=None: list(backends))

    return _use
