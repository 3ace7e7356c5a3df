"""KeyValueStore abstract base class.

Defines the contract of the local durable key-value store the
persistence adapter writes to.  The adapter interacts exclusively with
this interface; it never knows which concrete backend is behind it.

Semantics mirror a browser's ``localStorage``: string keys, string
values, ``None`` for a missing key.

Each concrete backend (``MemoryStore``, ``JsonFileStore``, ...)
implements ``get_item``, ``set_item`` and ``remove_item``.  A backend
that cannot reach its medium reports ``available == False`` so callers
can degrade to in-memory-only operation.
"""

from __future__ import annotations

import abc

from mgrs_mapper.core.exceptions import TransientError


class StorageError(TransientError):
    """Base error for durable-store failures.

    Attributes:
        store: Name of the store backend that raised the error.
    """

    default_stage = "storage"
    default_code = "STORAGE_FAILED"

    def __init__(self, message: str = "", *, store: str = "", **kwargs: object) -> None:
        self.store = store
        super().__init__(message, **kwargs)


class StorageUnavailableError(StorageError):
    """Raised when no durable store can be reached."""

    default_code = "STORAGE_UNAVAILABLE"


class StorageWriteError(StorageError):
    """Raised when a value cannot be written to the store."""

    default_code = "STORAGE_WRITE_FAILED"


class KeyValueStore(abc.ABC):
    """Abstract base class for durable key-value stores.

    Example usage::

        store = get_store("json_file", config)
        store.set_item("mgrs-map-project-name", "Recon North")
        store.get_item("mgrs-map-project-name")  # "Recon North"
    """

    #: Backend name used in logs and errors.
    name: str = ""

    @property
    def available(self) -> bool:
        """Whether the backing medium can currently be used."""
        return True

    @abc.abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the value stored under *key*, or ``None`` if absent.

        Raises:
            StorageError: If the medium cannot be read.
        """

    @abc.abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store *value* under *key*, replacing any previous value.

        Raises:
            StorageWriteError: If the value cannot be written.
        """

    @abc.abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove *key*; removing a missing key is not an error.

        Raises:
            StorageWriteError: If the removal cannot be written.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
