"""revstamp - stamp builds with their version-control revision."""

from revstamp.cache import deserialize, read_cache, serialize
from revstamp.config import RevstampConfig, load_config
from revstamp.display import DisplayState, normalize
from revstamp.errors import (
    ArtifactWriteError,
    InconsistentStateError,
    MalformedCacheError,
    NoRepositoryError,
    RevstampError,
    VCSCommandError,
)
from revstamp.pipeline import GenerateResult, freeze, generate
from revstamp.probe import probe
from revstamp.vcs import RevisionState

__version__ = "0.1.0"

__all__ = [
    "ArtifactWriteError",
    "DisplayState",
    "GenerateResult",
    "InconsistentStateError",
    "MalformedCacheError",
    "NoRepositoryError",
    "RevisionState",
    "RevstampConfig",
    "RevstampError",
    "VCSCommandError",
    "deserialize",
    "freeze",
    "generate",
    "load_config",
    "normalize",
    "probe",
    "read_cache",
    "serialize",
]
