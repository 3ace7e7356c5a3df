"""Persistence adapter: the AOI collection and project name in a durable store.

Write-through, best-effort durability:

- ``save`` serialises the whole collection on every mutation.  Write
  failures are logged and swallowed; the in-memory state stays
  authoritative and the user is not interrupted.
- ``load`` treats a missing key, unreadable store, malformed JSON or a
  non-list payload as "no data".  Individual malformed records are
  skipped and duplicate ids keep their first occurrence.
- With no store injected (or an unavailable one) every call is a no-op.

Store layout: two fixed keys, one holding the JSON array of AOI records
(``AOI.to_dict()``, no render handle), one holding the plain project
name string.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from mgrs_mapper.core.constants import AOI_STORAGE_KEY, PROJECT_NAME_STORAGE_KEY
from mgrs_mapper.models.aoi import AOI
from mgrs_mapper.storage.base import StorageError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from mgrs_mapper.storage.base import KeyValueStore

logger = logging.getLogger("mgrs_mapper.storage.persistence")


class PersistenceAdapter:
    """Serialises repository state to an injected ``KeyValueStore``.

    Args:
        store: Durable store, or ``None`` for in-memory-only operation.
        aois_key: Key holding the serialised AOI array.
        project_name_key: Key holding the project name.
    """

    def __init__(
        self,
        store: KeyValueStore | None,
        *,
        aois_key: str = AOI_STORAGE_KEY,
        project_name_key: str = PROJECT_NAME_STORAGE_KEY,
    ) -> None:
        self._store = store
        self._aois_key = aois_key
        self._project_name_key = project_name_key
        self._available = store is not None and store.available
        if store is not None and not self._available:
            logger.warning(
                "Durable store unavailable; running in memory only | store=%s",
                store.name,
            )

    @property
    def available(self) -> bool:
        """Whether reads and writes reach a durable store."""
        return self._available

    @property
    def store(self) -> KeyValueStore | None:
        """The injected store (``None`` when running in memory only)."""
        return self._store

    # ------------------------------------------------------------------
    # AOI collection
    # ------------------------------------------------------------------

    def save(self, aois: Iterable[AOI]) -> bool:
        """Write the whole collection.  Never raises.

        Returns:
            ``True`` if the write reached the store.
        """
        if not self._available or self._store is None:
            return False
        try:
            payload = json.dumps([aoi.to_dict() for aoi in aois])
            self._store.set_item(self._aois_key, payload)
        except (StorageError, OSError, TypeError, ValueError) as exc:
            logger.error(
                "AOI save failed | store=%s | key=%s | error=%s",
                self._store.name,
                self._aois_key,
                exc,
            )
            return False
        logger.debug("AOIs saved | store=%s | bytes=%d", self._store.name, len(payload))
        return True

    def load(self) -> list[AOI]:
        """Read the collection; any unreadable payload yields ``[]``."""
        if not self._available or self._store is None:
            return []
        try:
            raw = self._store.get_item(self._aois_key)
        except (StorageError, OSError) as exc:
            logger.error("AOI load failed | store=%s | error=%s", self._store.name, exc)
            return []
        if raw is None:
            return []

        try:
            records = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("Stored AOIs are not valid JSON; starting empty | error=%s", exc)
            return []
        if not isinstance(records, list):
            logger.warning(
                "Stored AOIs must be a JSON array, got %s; starting empty",
                type(records).__name__,
            )
            return []

        aois: list[AOI] = []
        seen: set[str] = set()
        for idx, record in enumerate(records):
            try:
                aoi = AOI.from_dict(record)
            except (TypeError, ValueError) as exc:
                logger.warning("Skipping malformed stored AOI | index=%d | error=%s", idx, exc)
                continue
            if aoi.id in seen:
                logger.warning("Skipping stored AOI with duplicate id | id=%s", aoi.id)
                continue
            seen.add(aoi.id)
            aois.append(aoi)

        logger.info("AOIs loaded | store=%s | count=%d", self._store.name, len(aois))
        return aois

    # ------------------------------------------------------------------
    # Project name
    # ------------------------------------------------------------------

    def save_project_name(self, name: str) -> bool:
        """Write the project name.  Never raises."""
        if not self._available or self._store is None:
            return False
        try:
            self._store.set_item(self._project_name_key, name)
        except (StorageError, OSError) as exc:
            logger.error(
                "Project name save failed | store=%s | error=%s",
                self._store.name,
                exc,
            )
            return False
        return True

    def load_project_name(self) -> str | None:
        """Read the project name; ``None`` if absent, empty or unreadable."""
        if not self._available or self._store is None:
            return None
        try:
            name = self._store.get_item(self._project_name_key)
        except (StorageError, OSError) as exc:
            logger.error(
                "Project name load failed | store=%s | error=%s",
                self._store.name,
                exc,
            )
            return None
        return name or None
