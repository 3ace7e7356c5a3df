"""Mapper configuration loaded from environment variables.

All configuration values have defaults that reproduce the browser
application's behaviour, so an empty environment yields a working
file-backed session.

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any value is out
    of its valid range.  This catches bad configuration at startup
    instead of on the first draw or import.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from mgrs_mapper.core.constants import (
    DEFAULT_MGRS_PRECISION,
    DEFAULT_PROJECT_NAME,
    DEFAULT_SQUARE_HALF_WIDTH_DEG,
)
from mgrs_mapper.core.exceptions import MapperError

DEFAULT_STORE_PATH = os.path.join("~", ".mgrs_mapper", "storage.json")

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class ConfigValidationError(MapperError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        self.message = message
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class MapperConfig:
    """Immutable mapper configuration.

    Loaded once when a session opens and threaded through its components.

    Attributes:
        store: Durable store backend (``json_file``, ``memory`` or ``none``).
        store_path: File backing the ``json_file`` store (``~`` is expanded).
        mgrs_precision: Digit pairs in generated MGRS strings (0-5).
        square_half_width_deg: Half width of manual-entry squares in degrees.
        default_project_name: Project name used when none is persisted.
        export_dir: Directory GeoJSON exports are written to.
        log_level: Root log level for the CLI.
    """

    store: str = "json_file"
    store_path: str = DEFAULT_STORE_PATH
    mgrs_precision: int = DEFAULT_MGRS_PRECISION
    square_half_width_deg: float = DEFAULT_SQUARE_HALF_WIDTH_DEG
    default_project_name: str = DEFAULT_PROJECT_NAME
    export_dir: str = "."
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> MapperConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a value is out of range or a
                required string value is empty.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``MGRS_MAPPER_MGRS_PRECISION=abc``).
        """
        config = cls(
            store=os.getenv("MGRS_MAPPER_STORE", "json_file"),
            store_path=os.getenv("MGRS_MAPPER_STORE_PATH", DEFAULT_STORE_PATH),
            mgrs_precision=int(
                os.getenv("MGRS_MAPPER_MGRS_PRECISION", str(DEFAULT_MGRS_PRECISION))
            ),
            square_half_width_deg=float(
                os.getenv(
                    "MGRS_MAPPER_SQUARE_HALF_WIDTH_DEG",
                    str(DEFAULT_SQUARE_HALF_WIDTH_DEG),
                )
            ),
            default_project_name=os.getenv(
                "MGRS_MAPPER_DEFAULT_PROJECT_NAME", DEFAULT_PROJECT_NAME
            ),
            export_dir=os.getenv("MGRS_MAPPER_EXPORT_DIR", "."),
            log_level=os.getenv("MGRS_MAPPER_LOG_LEVEL", "WARNING").upper(),
        )
        _validate(config)
        return config

    @property
    def resolved_store_path(self) -> str:
        """Return ``store_path`` with ``~`` expanded."""
        return os.path.expanduser(self.store_path)


def _validate(config: MapperConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if not 0 <= config.mgrs_precision <= 5:
        raise ConfigValidationError(
            "MGRS_MAPPER_MGRS_PRECISION",
            config.mgrs_precision,
            "must be between 0 and 5 (digit pairs)",
        )

    if not 0.0 < config.square_half_width_deg <= 1.0:
        raise ConfigValidationError(
            "MGRS_MAPPER_SQUARE_HALF_WIDTH_DEG",
            config.square_half_width_deg,
            "must be > 0 and <= 1 (degrees)",
        )

    if not config.default_project_name.strip():
        raise ConfigValidationError(
            "MGRS_MAPPER_DEFAULT_PROJECT_NAME",
            config.default_project_name,
            "must not be empty",
        )

    if not config.store:
        raise ConfigValidationError(
            "MGRS_MAPPER_STORE",
            config.store,
            "must not be empty",
        )

    if config.store == "json_file" and not config.store_path:
        raise ConfigValidationError(
            "MGRS_MAPPER_STORE_PATH",
            config.store_path,
            "must not be empty when MGRS_MAPPER_STORE=json_file",
        )

    if config.log_level not in _LOG_LEVELS:
        raise ConfigValidationError(
            "MGRS_MAPPER_LOG_LEVEL",
            config.log_level,
            f"must be one of {', '.join(sorted(_LOG_LEVELS))}",
        )
