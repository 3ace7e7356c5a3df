"""Coordinate codec: WGS 84 latitude/longitude to and from MGRS.

Pure functions with no state beyond cached pyproj transformers.

- **mgrs**: ``to_mgrs`` / ``from_mgrs`` / ``parse_mgrs``
- **_utm**: zone/band selection and UTM projection (pyproj)
- **_validation**: range checks and the codec's exception types
"""

from __future__ import annotations

from mgrs_mapper.coordinates._utm import latlon_from_utm, utm_from_latlon
from mgrs_mapper.coordinates._validation import (
    InvalidCoordinateError,
    InvalidMGRSFormatError,
    validate_lat_lon,
    validate_utm_coverage,
)
from mgrs_mapper.coordinates.mgrs import MGRSReference, from_mgrs, parse_mgrs, to_mgrs

__all__ = [
    "InvalidCoordinateError",
    "InvalidMGRSFormatError",
    "MGRSReference",
    "from_mgrs",
    "latlon_from_utm",
    "parse_mgrs",
    "to_mgrs",
    "utm_from_latlon",
    "validate_lat_lon",
    "validate_utm_coverage",
]
