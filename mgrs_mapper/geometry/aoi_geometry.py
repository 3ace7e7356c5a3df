"""AOI geometry engine.

Derives an AOI's centre MGRS reference and planar area from its
polygon boundary, synthesises the square used for manual MGRS entries,
and normalises vertex rings.

Approximations (adequate at AOI scale, tens of kilometres at most):
- The centroid is the arithmetic mean of the vertices, not the polygon's
  area centroid and not a geodesic centre.
- The area is the shoelace area of the ring after scaling degrees to
  metres at the ring's mean latitude.  Error grows with polygon size and
  latitude.

Unless stated otherwise, functions take vertices as ``(lat, lon)``
tuples; ``to_lat_lon`` / ``to_lon_lat`` swap between that order and the
stored ``(lon, lat)`` order.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from mgrs_mapper.coordinates import to_mgrs, validate_lat_lon
from mgrs_mapper.core.constants import DEFAULT_MGRS_PRECISION, DEFAULT_SQUARE_HALF_WIDTH_DEG
from mgrs_mapper.core.exceptions import ValidationError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from mgrs_mapper.models.aoi import AOI

logger = logging.getLogger("mgrs_mapper.geometry")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Minimum distinct vertices for a polygon
MIN_POLYGON_VERTICES = 3

# Metres-per-degree series on the WGS 84 ellipsoid
_LAT_M_PER_DEG = (111_132.92, -559.82, 1.175)
_LON_M_PER_DEG = (111_412.84, -93.5)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class AOIGeometryError(ValidationError):
    """Raised when a boundary cannot form a polygon."""

    default_stage = "geometry"
    default_code = "AOI_GEOMETRY_INVALID"


# ---------------------------------------------------------------------------
# Coordinate order and ring normalisation
# ---------------------------------------------------------------------------


def to_lat_lon(pairs: Iterable[Sequence[float]]) -> list[tuple[float, float]]:
    """Swap stored ``(lon, lat)`` pairs to ``(lat, lon)``."""
    return [(float(p[1]), float(p[0])) for p in pairs]


def to_lon_lat(pairs: Iterable[Sequence[float]]) -> list[tuple[float, float]]:
    """Swap ``(lat, lon)`` pairs to the stored ``(lon, lat)`` order."""
    return [(float(p[1]), float(p[0])) for p in pairs]


def normalize_ring(vertices: Sequence[Sequence[float]]) -> list[tuple[float, float]]:
    """Return an open ring without consecutive duplicates.

    Drops an explicit closing vertex (first == last) and repeated
    consecutive vertices.  Vertex order and orientation are preserved.
    Works for either coordinate order.
    """
    ring: list[tuple[float, float]] = []
    for vertex in vertices:
        point = (float(vertex[0]), float(vertex[1]))
        if ring and ring[-1] == point:
            continue
        ring.append(point)
    while len(ring) > 1 and ring[0] == ring[-1]:
        ring.pop()
    return ring


def validate_vertices(
    vertices: Sequence[Sequence[float]],
    context: str,
) -> list[tuple[float, float]]:
    """Validate a ``(lat, lon)`` boundary and return it normalised.

    Raises:
        InvalidCoordinateError: If any vertex is outside WGS 84 bounds.
        AOIGeometryError: If fewer than three distinct vertices remain.
    """
    ring = normalize_ring(vertices)
    for lat, lon in ring:
        validate_lat_lon(lat, lon)
    if len(set(ring)) < MIN_POLYGON_VERTICES:
        msg = (
            f"Boundary for {context} has {len(set(ring))} distinct vertices, "
            f"need at least {MIN_POLYGON_VERTICES}"
        )
        raise AOIGeometryError(msg)
    return ring


# ---------------------------------------------------------------------------
# Centroid
# ---------------------------------------------------------------------------


def mean_center(vertices: Sequence[Sequence[float]]) -> tuple[float, float]:
    """Return the arithmetic mean ``(lat, lon)`` of an open ring.

    Raises:
        AOIGeometryError: If there are no vertices.
    """
    ring = normalize_ring(vertices)
    if not ring:
        msg = "Cannot compute the centre of an empty boundary"
        raise AOIGeometryError(msg)
    lat = sum(v[0] for v in ring) / len(ring)
    lon = sum(v[1] for v in ring) / len(ring)
    return lat, lon


def derive_centroid_mgrs(
    vertices: Sequence[Sequence[float]],
    precision: int = DEFAULT_MGRS_PRECISION,
) -> str:
    """Return the MGRS reference of the vertex-mean centre.

    Raises:
        AOIGeometryError: If there are no vertices.
        InvalidCoordinateError: If the centre is outside MGRS coverage.
    """
    lat, lon = mean_center(vertices)
    return to_mgrs(lat, lon, precision)


# ---------------------------------------------------------------------------
# Planar area
# ---------------------------------------------------------------------------


def metres_per_degree(lat: float) -> tuple[float, float]:
    """Return ``(metres per degree latitude, metres per degree longitude)`` at *lat*."""
    phi = math.radians(lat)
    a0, a2, a4 = _LAT_M_PER_DEG
    b1, b3 = _LON_M_PER_DEG
    per_lat = a0 + a2 * math.cos(2 * phi) + a4 * math.cos(4 * phi)
    per_lon = b1 * math.cos(phi) + b3 * math.cos(3 * phi)
    return per_lat, per_lon


def planar_area(vertices: Sequence[Sequence[float]]) -> float:
    """Approximate polygon area in square metres.

    Scales the ``(lat, lon)`` ring to metres at its mean latitude and
    takes the absolute shoelace area (via a Shapely polygon).  Rings
    with fewer than three distinct vertices have zero area.
    """
    ring = normalize_ring(vertices)
    if len(set(ring)) < MIN_POLYGON_VERTICES:
        return 0.0

    from shapely.geometry import Polygon

    mean_lat = sum(v[0] for v in ring) / len(ring)
    per_lat, per_lon = metres_per_degree(mean_lat)
    scaled = [(lon * per_lon, lat * per_lat) for lat, lon in ring]
    return abs(Polygon(scaled).area)


def format_dimensions(area_m2: float) -> str:
    """Format an area as the AOI ``dimensions`` summary (``"123.45 sq m"``)."""
    return f"{area_m2:.2f} sq m"


# ---------------------------------------------------------------------------
# Manual-entry square
# ---------------------------------------------------------------------------


def square_from_center(
    lat: float,
    lon: float,
    half_width_deg: float = DEFAULT_SQUARE_HALF_WIDTH_DEG,
) -> list[tuple[float, float]]:
    """Return a 4-vertex axis-aligned ``(lat, lon)`` square around a point.

    The square has a fixed angular half width; it is not sized in metres.

    Raises:
        ValueError: If *half_width_deg* is not positive.
    """
    if half_width_deg <= 0:
        msg = f"Square half width must be > 0 degrees, got {half_width_deg}"
        raise ValueError(msg)
    h = half_width_deg
    return [
        (lat - h, lon - h),
        (lat - h, lon + h),
        (lat + h, lon + h),
        (lat + h, lon - h),
    ]


# ---------------------------------------------------------------------------
# Extent (zoom to all)
# ---------------------------------------------------------------------------


def compute_extent(aois: Iterable[AOI]) -> tuple[float, float, float, float] | None:
    """Bounding box over every AOI vertex.

    Returns:
        ``(min_lon, min_lat, max_lon, max_lat)``, or ``None`` when there
        are no vertices.
    """
    lons: list[float] = []
    lats: list[float] = []
    for aoi in aois:
        for lon, lat in aoi.bounds:
            lons.append(lon)
            lats.append(lat)
    if not lons:
        return None
    return (min(lons), min(lats), max(lons), max(lats))
