"""In-memory store: a dict that lives as long as the process."""

from __future__ import annotations

from mgrs_mapper.storage.base import KeyValueStore


class MemoryStore(KeyValueStore):
    """Volatile ``KeyValueStore`` used for tests and throwaway sessions."""

    name = "memory"

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        """Return the stored keys in insertion order."""
        return list(self._items)
