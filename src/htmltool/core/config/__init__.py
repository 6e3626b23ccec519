"""Configuration loading and validation."""

from .models import (
    AppConfig,
    ExtractionConfig,
    ExtractionMode,
    FetchConfig,
    LoggingConfig,
    parse_header_spec,
)
from .loader import ConfigError, load_app_config

__all__ = [
    # Enums
    "ExtractionMode",
    # Config models
    "AppConfig",
    "ExtractionConfig",
    "FetchConfig",
    "LoggingConfig",
    "parse_header_spec",
    # Loaders
    "ConfigError",
    "load_app_config",
]
