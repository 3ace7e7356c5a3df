"""Durable storage for AOIs and the project name.

- base: ``KeyValueStore`` contract and storage exceptions
- memory / json_file: built-in store backends
- factory: backend registry (``get_store``)
- persistence: ``PersistenceAdapter`` (best-effort, write-through)
"""

from __future__ import annotations

from mgrs_mapper.storage.base import (
    KeyValueStore,
    StorageError,
    StorageUnavailableError,
    StorageWriteError,
)
from mgrs_mapper.storage.factory import get_store, list_stores, register_store
from mgrs_mapper.storage.json_file import JsonFileStore
from mgrs_mapper.storage.memory import MemoryStore
from mgrs_mapper.storage.persistence import PersistenceAdapter

__all__ = [
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "PersistenceAdapter",
    "StorageError",
    "StorageUnavailableError",
    "StorageWriteError",
    "get_store",
    "list_stores",
    "register_store",
]
