"""Locate and load ``revstamp.yaml``.

A build step runs from the project it stamps, so the only places a config is
looked for are an explicit ``--config`` path and ``./revstamp.yaml``. Build
tools pass their paths in through the environment, which is why string
values may reference ``${VAR}``.
"""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import RevstampConfig

CONFIG_FILENAME = "revstamp.yaml"

_ENV_REF = re.compile(r"\$\{(\w+)\}")


def find_config(cli_path: str | None = None) -> Path | None:
    """The config file to load: *cli_path* if given, else ./revstamp.yaml if present."""
    if cli_path:
        path = Path(cli_path)
        if not path.is_file():
            raise ValueError(f"Config file not found: {cli_path}")
        return path
    local = Path(CONFIG_FILENAME)
    return local if local.is_file() else None


def load_config(cli_path: str | None = None) -> RevstampConfig:
    """Load the config, falling back to defaults when there is no file or it is empty."""
    path = find_config(cli_path)
    if path is None:
        return RevstampConfig()

    try:
        raw = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if raw is None:
        return RevstampConfig()
    if not isinstance(raw, dict):
        raise ValueError(
            f"Invalid config in {path}: expected a mapping, got {type(raw).__name__}"
        )

    try:
        return RevstampConfig(**expand_env_vars(raw))
    except ValidationError as e:
        raise ValueError(f"Invalid config in {path}: {e}") from e


def expand_env_vars(obj: object) -> object:
    """Replace ${VAR} in every string inside *obj*; unset variables become ""."""
    if isinstance(obj, str):
        return _ENV_REF.sub(lambda m: os.environ.get(m.group(1), ""), obj)
    if isinstance(obj, dict):
        return {k: expand_env_vars(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `revstamp config init`
DEFAULT_CONFIG_TEMPLATE = """\
# revstamp.yaml

# Working copy to probe. Relative paths below resolve against it.
repo_path: "."

# Revision cache. Commit it so builds from a source archive, which have no
# VCS history, still stamp the revision it records. Set to null to disable.
cache_path: ".revstamp.cache"

# Backends tried in order; the first that recognises repo_path wins.
backends: ["git", "hg"]

output:
  # Constants for program source. Only rewritten when its content changes.
  machine_header: "revision.h"
  machine_format: "h"            # h | py | json | sh
  # Info.plist preprocessor definitions with display values. Always rewritten.
  display_header: "revision-display.h"
  # Optional copy of the cache with display tag/branch. Always rewritten.
  # display_cache: "revision-display.cache"

# Logging
log_level: "info"              # debug | info | warn | error
"""
