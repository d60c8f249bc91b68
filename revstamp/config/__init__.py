from .loader import load_config
from .models import OutputConfig, RevstampConfig

__all__ = [
    "OutputConfig",
    "RevstampConfig",
    "load_config",
]
