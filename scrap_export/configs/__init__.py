"""Exporter configuration loading and validation."""

from scrap_export.configs.loader import (
    ConfigError,
    ExportConfig,
    LoggingConfig,
    OutputConfig,
    load_config,
)

__all__ = [
    "ConfigError",
    "ExportConfig",
    "LoggingConfig",
    "OutputConfig",
    "load_config",
]
