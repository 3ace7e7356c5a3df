"""Data model for an Area of Interest (AOI).

An AOI is a named polygon annotated with the MGRS grid reference of its
centroid and a planar area summary.  Records are immutable; the
repository replaces a record when it is renamed or reshaped.

Coordinate order: ``bounds`` holds ``(lon, lat)`` pairs (GeoJSON order)
with the ring left open (the first and last vertex are implicitly
connected).  The geometry engine and the MGRS codec work in
``(lat, lon)``; use :attr:`AOI.lat_lon_vertices` at that boundary.

The on-map render handle is deliberately not a field: it lives in
:class:`mgrs_mapper.state.layers.LayerRegistry`, keyed by ``id``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace


@dataclass(frozen=True, slots=True)
class AOI:
    """A named polygon Area of Interest.

    Attributes:
        id: Opaque unique identifier, immutable after creation.
        name: Human-readable label (e.g. ``"AOI 3"``).
        mgrs_coordinate: MGRS string of the vertex-mean centroid.
        dimensions: Free-text area summary (e.g. ``"8679.12 sq m"``).
        bounds: Polygon vertices as ``(lon, lat)`` tuples, ring not closed.
        date_created: ISO 8601 creation timestamp.
    """

    id: str
    name: str
    mgrs_coordinate: str = ""
    dimensions: str = ""
    bounds: list[tuple[float, float]] = field(default_factory=list)
    date_created: str = ""

    def to_dict(self) -> dict[str, object]:
        """Serialise to the persisted record layout (camelCase keys)."""
        return {
            "id": self.id,
            "name": self.name,
            "mgrsCoordinate": self.mgrs_coordinate,
            "dimensions": self.dimensions,
            "bounds": [list(c) for c in self.bounds],
            "dateCreated": self.date_created,
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> AOI:
        """Deserialise from a persisted record.

        Unknown keys (such as a stale ``layer`` reference) are ignored.

        Raises:
            TypeError: If field values have unexpected types.
            ValueError: If ``id`` is missing or a vertex is malformed.
        """
        if not isinstance(data, dict):
            msg = f"AOI record must be a dict, got {type(data).__name__}"
            raise TypeError(msg)

        aoi_id = data.get("id")
        if not aoi_id:
            msg = "AOI record has no id"
            raise ValueError(msg)

        bounds_raw = data.get("bounds", [])
        if not isinstance(bounds_raw, list):
            msg = f"bounds must be a list, got {type(bounds_raw).__name__}"
            raise TypeError(msg)

        bounds: list[tuple[float, float]] = []
        for idx, vertex in enumerate(bounds_raw):
            if not isinstance(vertex, list | tuple) or len(vertex) < 2:
                msg = f"Malformed vertex at index {idx}: {vertex!r}"
                raise ValueError(msg)
            bounds.append((float(vertex[0]), float(vertex[1])))

        return cls(
            id=str(aoi_id),
            name=str(data.get("name", "")),
            mgrs_coordinate=str(data.get("mgrsCoordinate", "")),
            dimensions=str(data.get("dimensions", "")),
            bounds=bounds,
            date_created=str(data.get("dateCreated", "")),
        )

    def renamed(self, name: str) -> AOI:
        """Return a copy carrying *name*."""
        return replace(self, name=name)

    def with_bounds(self, bounds: list[tuple[float, float]]) -> AOI:
        """Return a copy with new ``(lon, lat)`` bounds.

        Derived fields are left untouched.
        """
        return replace(self, bounds=list(bounds))

    def with_id(self, aoi_id: str) -> AOI:
        """Return a copy re-keyed to *aoi_id*."""
        return replace(self, id=aoi_id)

    @property
    def lat_lon_vertices(self) -> list[tuple[float, float]]:
        """Vertices as ``(lat, lon)`` tuples for the codec and render surface."""
        return [(lat, lon) for lon, lat in self.bounds]

    @property
    def vertex_count(self) -> int:
        """Number of vertices in the (open) ring."""
        return len(self.bounds)
