"""AOI repository: the ordered in-memory collection of a project.

Responsibilities:
- Create AOIs from drawn boundaries or manual MGRS entries, deriving the
  centroid MGRS reference and area summary.
- Rename, reshape, reorder and delete AOIs.
- Keep ids unique (fresh ids on create, re-keying on import).
- Write the whole collection through the ``PersistenceAdapter`` after
  every mutation.
- Release render handles before their record is discarded and notify
  removal listeners (the selection state machine) afterwards.

Every operation validates its input and builds the replacement records
before touching the collection, so a raising operation leaves the
collection exactly as it was.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mgrs_mapper.coordinates import from_mgrs, parse_mgrs
from mgrs_mapper.core.constants import (
    DEFAULT_AOI_NAME_TEMPLATE,
    DEFAULT_MGRS_PRECISION,
    DEFAULT_SQUARE_HALF_WIDTH_DEG,
)
from mgrs_mapper.core.exceptions import ValidationError
from mgrs_mapper.geometry import (
    compute_extent,
    derive_centroid_mgrs,
    format_dimensions,
    planar_area,
    square_from_center,
    to_lon_lat,
    validate_vertices,
)
from mgrs_mapper.models.aoi import AOI
from mgrs_mapper.state.layers import LayerRegistry
from mgrs_mapper.utils.helpers import isoformat_utc, new_aoi_id, utc_now

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator, Sequence
    from datetime import datetime

    from mgrs_mapper.storage.persistence import PersistenceAdapter

    RemovalListener = Callable[[frozenset[str]], None]

logger = logging.getLogger("mgrs_mapper.state.repository")


class AOINotFoundError(ValidationError):
    """Raised when an operation names an AOI id that is not in the collection.

    Attributes:
        aoi_id: The id that was looked up.
    """

    default_stage = "state"
    default_code = "AOI_NOT_FOUND"

    def __init__(self, aoi_id: str) -> None:
        self.aoi_id = aoi_id
        super().__init__(f"AOI not found: {aoi_id}")


class AOIRepository:
    """Ordered AOI collection with write-through persistence.

    Args:
        persistence: Adapter every mutation is saved through.
        clock: Returns the current time (``date_created`` stamps).
        id_factory: Returns a fresh candidate id.
        mgrs_precision: Digit pairs of derived MGRS references.
        layers: Render-handle registry; a private one is created if omitted.
    """

    def __init__(
        self,
        persistence: PersistenceAdapter,
        *,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_aoi_id,
        mgrs_precision: int = DEFAULT_MGRS_PRECISION,
        layers: LayerRegistry | None = None,
    ) -> None:
        self._persistence = persistence
        self._clock = clock
        self._id_factory = id_factory
        self._mgrs_precision = mgrs_precision
        self._layers = layers if layers is not None else LayerRegistry()
        self._aois: list[AOI] = []
        self._removal_listeners: list[RemovalListener] = []

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def aois(self) -> tuple[AOI, ...]:
        """Snapshot of the collection in display order."""
        return tuple(self._aois)

    @property
    def layers(self) -> LayerRegistry:
        return self._layers

    def find(self, aoi_id: str) -> AOI | None:
        """Return the AOI with *aoi_id*, or ``None``."""
        for aoi in self._aois:
            if aoi.id == aoi_id:
                return aoi
        return None

    def get(self, aoi_id: str) -> AOI:
        """Return the AOI with *aoi_id*.

        Raises:
            AOINotFoundError: If no AOI has that id.
        """
        aoi = self.find(aoi_id)
        if aoi is None:
            raise AOINotFoundError(aoi_id)
        return aoi

    def extent(self, aoi_id: str | None = None) -> tuple[float, float, float, float] | None:
        """``(min_lon, min_lat, max_lon, max_lat)`` of one AOI, or over every AOI.

        Returns ``None`` when the collection is empty.

        Raises:
            AOINotFoundError: If *aoi_id* is given and no AOI has that id.
        """
        if aoi_id is not None:
            return compute_extent([self.get(aoi_id)])
        return compute_extent(self._aois)

    def __len__(self) -> int:
        return len(self._aois)

    def __iter__(self) -> Iterator[AOI]:
        return iter(tuple(self._aois))

    def __contains__(self, aoi_id: object) -> bool:
        return any(aoi.id == aoi_id for aoi in self._aois)

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_removal_listener(self, listener: RemovalListener) -> None:
        """Call *listener* with the ids removed by delete, delete-all or hydrate."""
        self._removal_listeners.append(listener)

    def _notify_removed(self, aoi_ids: Iterable[str]) -> None:
        removed = frozenset(aoi_ids)
        if not removed:
            return
        for listener in self._removal_listeners:
            listener(removed)

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create(
        self,
        vertices_lat_lon: Sequence[Sequence[float]],
        name: str | None = None,
    ) -> AOI:
        """Create an AOI from a drawn ``(lat, lon)`` boundary.

        The default name is ``"AOI {n}"`` where ``n`` is the collection
        size plus one.

        Raises:
            InvalidCoordinateError: If a vertex is out of range or the
                centroid is outside MGRS coverage.
            AOIGeometryError: If fewer than three distinct vertices remain.
        """
        label = self._resolve_name(name)
        ring = validate_vertices(vertices_lat_lon, f"AOI '{label}'")
        mgrs_coordinate = derive_centroid_mgrs(ring, self._mgrs_precision)
        dimensions = format_dimensions(planar_area(ring))

        aoi = AOI(
            id=self._fresh_id(),
            name=label,
            mgrs_coordinate=mgrs_coordinate,
            dimensions=dimensions,
            bounds=to_lon_lat(ring),
            date_created=isoformat_utc(self._clock()),
        )
        self._aois.append(aoi)
        self._save()
        logger.info(
            "AOI created | id=%s | name=%s | mgrs=%s | dimensions=%s",
            aoi.id,
            aoi.name,
            aoi.mgrs_coordinate,
            aoi.dimensions,
        )
        return aoi

    def create_from_mgrs(
        self,
        text: str,
        half_width_deg: float = DEFAULT_SQUARE_HALF_WIDTH_DEG,
        name: str | None = None,
    ) -> AOI:
        """Create a square AOI centred on a manually entered MGRS reference.

        The square has a fixed angular half width; ``mgrs_coordinate`` is
        the normalised entry text and ``dimensions`` is left empty.

        Raises:
            InvalidMGRSFormatError: If *text* is not a valid reference.
            InvalidCoordinateError: If the square leaves WGS 84 bounds.
        """
        reference = parse_mgrs(text)
        lat, lon = from_mgrs(text)
        label = self._resolve_name(name)
        ring = validate_vertices(
            square_from_center(lat, lon, half_width_deg),
            f"MGRS entry '{reference}'",
        )

        aoi = AOI(
            id=self._fresh_id(),
            name=label,
            mgrs_coordinate=_compact_mgrs(text),
            dimensions="",
            bounds=to_lon_lat(ring),
            date_created=isoformat_utc(self._clock()),
        )
        self._aois.append(aoi)
        self._save()
        logger.info(
            "AOI created from MGRS | id=%s | name=%s | mgrs=%s | centre=(%.6f, %.6f)",
            aoi.id,
            aoi.name,
            aoi.mgrs_coordinate,
            lat,
            lon,
        )
        return aoi

    def append(self, aois: Iterable[AOI]) -> list[AOI]:
        """Append imported AOIs, re-keying any id already in use.

        Returns:
            The AOIs as stored (possibly with new ids).
        """
        taken = {aoi.id for aoi in self._aois}
        added: list[AOI] = []
        for aoi in aois:
            if aoi.id in taken:
                fresh = self._fresh_id(taken)
                logger.warning("Imported AOI id collides; re-keyed | old_id=%s | new_id=%s", aoi.id, fresh)
                aoi = aoi.with_id(fresh)
            taken.add(aoi.id)
            added.append(aoi)

        if not added:
            return added
        self._aois.extend(added)
        self._save()
        logger.info("AOIs appended | count=%d | total=%d", len(added), len(self._aois))
        return added

    def hydrate(self, aois: Iterable[AOI]) -> None:
        """Replace the collection with records loaded from storage.

        Does not write back.  Handles of AOIs no longer present are released.
        """
        previous = {aoi.id for aoi in self._aois}
        self._aois = list(aois)
        current = {aoi.id for aoi in self._aois}
        self._layers.retain(current)
        self._notify_removed(previous - current)
        logger.info("Repository hydrated | count=%d", len(self._aois))

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def rename(self, aoi_id: str, new_name: str) -> AOI:
        """Rename an AOI; a name that trims to empty keeps the current one.

        Raises:
            AOINotFoundError: If no AOI has *aoi_id*.
        """
        index, aoi = self._locate(aoi_id)
        trimmed = new_name.strip()
        if not trimmed or trimmed == aoi.name:
            return aoi
        renamed = aoi.renamed(trimmed)
        self._aois[index] = renamed
        self._save()
        logger.info("AOI renamed | id=%s | old=%s | new=%s", aoi_id, aoi.name, trimmed)
        return renamed

    def update_boundary(self, aoi_id: str, vertices_lat_lon: Sequence[Sequence[float]]) -> AOI:
        """Replace an AOI's boundary.

        ``mgrs_coordinate`` and ``dimensions`` keep the values derived at
        creation.

        Raises:
            AOINotFoundError: If no AOI has *aoi_id*.
            InvalidCoordinateError, AOIGeometryError: If the boundary is invalid.
        """
        index, aoi = self._locate(aoi_id)
        ring = validate_vertices(vertices_lat_lon, f"AOI '{aoi.name}'")
        updated = aoi.with_bounds(to_lon_lat(ring))
        self._aois[index] = updated
        self._save()
        logger.info("AOI boundary updated | id=%s | vertices=%d", aoi_id, updated.vertex_count)
        return updated

    def move(self, aoi_id: str, new_index: int) -> None:
        """Move an AOI to *new_index* in display order (clamped to the collection).

        Raises:
            AOINotFoundError: If no AOI has *aoi_id*.
        """
        index, aoi = self._locate(aoi_id)
        target = max(0, min(new_index, len(self._aois) - 1))
        if target == index:
            return
        reordered = [a for a in self._aois if a.id != aoi_id]
        reordered.insert(target, aoi)
        self._aois = reordered
        self._save()
        logger.info("AOI moved | id=%s | from=%d | to=%d", aoi_id, index, target)

    def delete(self, aoi_id: str) -> AOI:
        """Remove an AOI, releasing its render handle first.

        Raises:
            AOINotFoundError: If no AOI has *aoi_id*.
        """
        index, aoi = self._locate(aoi_id)
        self._layers.release(aoi_id)
        del self._aois[index]
        self._save()
        logger.info("AOI deleted | id=%s | name=%s | remaining=%d", aoi_id, aoi.name, len(self._aois))
        self._notify_removed([aoi_id])
        return aoi

    def delete_all(self) -> int:
        """Remove every AOI; returns how many were removed."""
        removed = [aoi.id for aoi in self._aois]
        self._layers.release_all()
        self._aois = []
        self._save()
        logger.info("All AOIs deleted | count=%d", len(removed))
        self._notify_removed(removed)
        return len(removed)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _locate(self, aoi_id: str) -> tuple[int, AOI]:
        for index, aoi in enumerate(self._aois):
            if aoi.id == aoi_id:
                return index, aoi
        raise AOINotFoundError(aoi_id)

    def _resolve_name(self, name: str | None) -> str:
        if name is not None and name.strip():
            return name.strip()
        return DEFAULT_AOI_NAME_TEMPLATE.format(n=len(self._aois) + 1)

    def _fresh_id(self, taken: set[str] | None = None) -> str:
        in_use = taken if taken is not None else {aoi.id for aoi in self._aois}
        candidate = self._id_factory()
        while candidate in in_use:
            candidate = self._id_factory()
        return candidate

    def _save(self) -> None:
        self._persistence.save(self._aois)


def _compact_mgrs(text: str) -> str:
    """Entry text without whitespace, upper-cased (``"15t vk 123 456"`` -> ``"15TVK123456"``)."""
    return "".join(text.split()).upper()
