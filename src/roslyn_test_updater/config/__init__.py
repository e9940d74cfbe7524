"""Configuration loading and validation."""

from .loader import load_config
from .schema import (
    LocatorConfig,
    LoggingConfig,
    MarkersConfig,
    OutputConfig,
    UpdaterConfig,
)

__all__ = [
    # Loader
    "load_config",
    # Root config
    "UpdaterConfig",
    # Sections
    "LocatorConfig",
    "LoggingConfig",
    "MarkersConfig",
    "OutputConfig",
]
