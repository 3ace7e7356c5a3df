"""Unified exception taxonomy.

Provides a shared base exception hierarchy for the codec, geometry,
interchange, storage and state layers. Every domain exception inherits
from ``MapperError`` and carries structured context fields that let the
front-end decide how to surface a failure.

Taxonomy categories
-------------------
- ``ValidationError``: bad user input (coordinates, MGRS text, GeoJSON).
  Surfaced as a blocking notice; the operation is aborted.
- ``TransientError``: durable-store hiccups. Logged and swallowed.
- ``PermanentError``: unrecoverable failures of a single action
  (file read/write).

Every exception exposes ``to_error_dict()`` for a stable structured
error payload suitable for logging and CLI output.
"""

from __future__ import annotations


class MapperError(Exception):
    """Base exception for all mapper-domain errors.

    Attributes:
        message: Human-readable error description.
        stage: Layer where the error occurred
            (e.g. ``"coordinates"``, ``"interchange"``).
        code: Machine-readable error code (e.g. ``"MGRS_FORMAT_INVALID"``).
        retryable: Whether repeating the same action may succeed.
    """

    #: Default stage for subclasses (override via class attribute or kwarg).
    default_stage: str = ""
    #: Default code for subclasses (override via class attribute or kwarg).
    default_code: str = ""

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool = False,
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = retryable
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class."""
        if isinstance(self, ValidationError):
            return "validation"
        if isinstance(self, TransientError):
            return "transient"
        if isinstance(self, PermanentError):
            return "permanent"
        return "transient" if self.retryable else "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(MapperError):
    """Input or domain-model validation failure. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class TransientError(MapperError):
    """Temporary failure that may succeed on retry."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class PermanentError(MapperError):
    """Unrecoverable failure of a single action. Not retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]
