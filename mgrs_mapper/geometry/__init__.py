"""AOI geometry engine: centroid MGRS, planar area, squares and rings."""

from __future__ import annotations

from mgrs_mapper.geometry.aoi_geometry import (
    MIN_POLYGON_VERTICES,
    AOIGeometryError,
    compute_extent,
    derive_centroid_mgrs,
    format_dimensions,
    mean_center,
    metres_per_degree,
    normalize_ring,
    planar_area,
    square_from_center,
    to_lat_lon,
    to_lon_lat,
    validate_vertices,
)

__all__ = [
    "MIN_POLYGON_VERTICES",
    "AOIGeometryError",
    "compute_extent",
    "derive_centroid_mgrs",
    "format_dimensions",
    "mean_center",
    "metres_per_degree",
    "normalize_ring",
    "planar_area",
    "square_from_center",
    "to_lat_lon",
    "to_lon_lat",
    "validate_vertices",
]
