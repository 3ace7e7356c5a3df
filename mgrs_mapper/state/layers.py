"""Render-handle registry.

Maps an AOI id to whatever object the render surface uses to draw that
AOI (a map layer, a widget, ...).  The association is weak in the sense
that it is never serialised and never used to derive geometry; records
are looked up by id, handles are looked up here.

Releasing a handle calls its ``remove()`` method when it has one, so a
map layer disappears before the record it draws is discarded.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

logger = logging.getLogger("mgrs_mapper.state.layers")


class LayerRegistry:
    """Side mapping from AOI id to render handle."""

    def __init__(self) -> None:
        self._handles: dict[str, object] = {}

    def bind(self, aoi_id: str, handle: object) -> None:
        """Associate *handle* with *aoi_id*, releasing any previous handle."""
        previous = self._handles.get(aoi_id)
        if previous is not None and previous is not handle:
            _remove_handle(aoi_id, previous)
        self._handles[aoi_id] = handle

    def get(self, aoi_id: str) -> object | None:
        return self._handles.get(aoi_id)

    def release(self, aoi_id: str) -> bool:
        """Remove and forget the handle of *aoi_id*.

        Returns:
            ``True`` if a handle was bound.
        """
        handle = self._handles.pop(aoi_id, None)
        if handle is None:
            return False
        _remove_handle(aoi_id, handle)
        return True

    def release_all(self) -> int:
        """Release every handle; returns how many were bound."""
        count = 0
        for aoi_id in list(self._handles):
            count += self.release(aoi_id)
        return count

    def retain(self, aoi_ids: Iterable[str]) -> int:
        """Release handles whose id is not in *aoi_ids*; returns the number released."""
        keep = set(aoi_ids)
        stale = [aoi_id for aoi_id in self._handles if aoi_id not in keep]
        for aoi_id in stale:
            self.release(aoi_id)
        if stale:
            logger.debug("Released stale render handles | count=%d", len(stale))
        return len(stale)

    def __len__(self) -> int:
        return len(self._handles)

    def __contains__(self, aoi_id: object) -> bool:
        return aoi_id in self._handles


def _remove_handle(aoi_id: str, handle: object) -> None:
    remove = getattr(handle, "remove", None)
    if callable(remove):
        remove()
        logger.debug("Render handle removed | id=%s", aoi_id)
