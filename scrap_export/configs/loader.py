"""Configuration loader for the Therion exporter.

Loads and validates ``export.yaml`` into typed, frozen dataclasses.

Usage::

    from scrap_export.configs.loader import load_config
    cfg = load_config()                      # default path
    cfg = load_config("/custom/export.yaml") # explicit path
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from scrap_export.utils.fs import load_yaml

logger = logging.getLogger(__name__)

MAX_PRECISION = 10
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
ROTATE_MODES = ("size", "time")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


# ---------------------------------------------------------------------------
# Dataclasses -- mirror the YAML structure
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class OutputConfig:
    """``.th2`` output options."""

    precision: int = 2
    encoding: str = "utf-8"
    trailing_newline: bool = True


@dataclass(frozen=True)
class LoggingConfig:
    """Arguments forwarded to ``setup_logging``."""

    level: str = "INFO"
    json: bool = False
    color: bool = True
    file: str | None = None
    rotate: dict[str, Any] | None = None


@dataclass(frozen=True)
class ExportConfig:
    """Complete exporter configuration loaded from ``export.yaml``."""

    output: OutputConfig
    logging: LoggingConfig


# ---------------------------------------------------------------------------
# Internal parsing helpers
# ---------------------------------------------------------------------------


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    """Return a top-level section, treating absent / null as empty."""
    raw = data.get(name)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(
            f"Section '{name}' must be a mapping, got {type(raw).__name__}"
        )
    return raw


def _int_field(data: dict[str, Any], section: str, key: str, default: int) -> int:
    """Read an integer field; bools and floats are rejected, not coerced."""
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(
            f"{section}.{key} must be an integer, got {value!r}"
        )
    return value


def _bool_field(data: dict[str, Any], section: str, key: str, default: bool) -> bool:
    """Read a boolean field; strings such as ``"false"`` are rejected."""
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(
            f"{section}.{key} must be true or false, got {value!r}"
        )
    return value


def _parse_output(data: dict[str, Any]) -> OutputConfig:
    """Parse the ``export`` section."""
    precision = _int_field(data, "export", "precision", 2)
    if not 0 <= precision <= MAX_PRECISION:
        raise ConfigError(
            f"export.precision must be in [0, {MAX_PRECISION}], got {precision}"
        )
    encoding = str(data.get("encoding", "utf-8"))
    if not encoding or len(encoding.split()) != 1:
        raise ConfigError(
            f"export.encoding must be a single token, got {encoding!r}"
        )
    return OutputConfig(
        precision=precision,
        encoding=encoding,
        trailing_newline=_bool_field(data, "export", "trailing_newline", True),
    )


def _parse_logging(data: dict[str, Any]) -> LoggingConfig:
    """Parse the ``logging`` section."""
    level = str(data.get("level", "INFO")).upper()
    if level not in LOG_LEVELS:
        raise ConfigError(
            f"logging.level must be one of {list(LOG_LEVELS)}, got '{level}'"
        )
    rotate = data.get("rotate")
    if rotate is not None and not isinstance(rotate, dict):
        raise ConfigError(
            f"logging.rotate must be a mapping or null, got {rotate!r}"
        )
    if rotate is not None:
        mode = rotate.get("mode", "size")
        if mode not in ROTATE_MODES:
            raise ConfigError(
                f"logging.rotate.mode must be one of {list(ROTATE_MODES)}, got {mode!r}"
            )
    log_file = data.get("file")
    return LoggingConfig(
        level=level,
        json=_bool_field(data, "logging", "json", False),
        color=_bool_field(data, "logging", "color", True),
        file=str(log_file) if log_file else None,
        rotate=rotate,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def default_config_path() -> Path:
    """Path of the ``export.yaml`` shipped alongside this module."""
    return Path(__file__).parent / "export.yaml"


def load_config(path: str | Path | None = None) -> ExportConfig:
    """Load and validate exporter configuration from YAML.

    Parameters
    ----------
    path : str | Path | None
        Path to ``export.yaml``.  ``None`` loads the default shipped
        alongside this module.

    Returns
    -------
    ExportConfig
        Fully validated, frozen configuration object.

    Raises
    ------
    ConfigError
        If the YAML is malformed or any field fails validation.
    FileNotFoundError
        If *path* does not exist.
    """
    path = default_config_path() if path is None else Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    logger.info("Loading configuration from %s", path)

    try:
        data = load_yaml(path)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Malformed YAML in {path}: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration root must be a mapping: {path}")

    config = ExportConfig(
        output=_parse_output(_section(data, "export")),
        logging=_parse_logging(_section(data, "logging")),
    )

    logger.debug("Configuration loaded: %s", config)
    return config
