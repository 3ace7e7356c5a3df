"""Validation helpers for the coordinate codec.

Responsibilities:
- Exception types raised by the codec (re-exported from ``__init__``)
- WGS 84 range and UTM coverage checks for latitude/longitude input
"""

from __future__ import annotations

import math

from mgrs_mapper.coordinates._constants import (
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
    UTM_MAX_LATITUDE,
    UTM_MIN_LATITUDE,
)
from mgrs_mapper.core.exceptions import ValidationError

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class InvalidCoordinateError(ValidationError):
    """Raised when a latitude/longitude is out of range or not representable."""

    default_stage = "coordinates"
    default_code = "COORDINATE_INVALID"


class InvalidMGRSFormatError(ValidationError):
    """Raised when an MGRS string cannot be parsed."""

    default_stage = "coordinates"
    default_code = "MGRS_FORMAT_INVALID"


# ---------------------------------------------------------------------------
# Coordinate validation
# ---------------------------------------------------------------------------


def validate_lat_lon(lat: float, lon: float) -> None:
    """Validate that ``(lat, lon)`` lies within WGS 84 bounds.

    Raises:
        InvalidCoordinateError: If either value is non-finite or out of range.
    """
    if not (math.isfinite(lat) and math.isfinite(lon)):
        msg = f"Coordinate ({lat}, {lon}) is not a finite number"
        raise InvalidCoordinateError(msg)
    if not (MIN_LATITUDE <= lat <= MAX_LATITUDE):
        msg = f"Latitude {lat} out of WGS 84 range [{MIN_LATITUDE}, {MAX_LATITUDE}]"
        raise InvalidCoordinateError(msg)
    if not (MIN_LONGITUDE <= lon <= MAX_LONGITUDE):
        msg = f"Longitude {lon} out of WGS 84 range [{MIN_LONGITUDE}, {MAX_LONGITUDE}]"
        raise InvalidCoordinateError(msg)


def validate_utm_coverage(lat: float, lon: float) -> None:
    """Validate that ``(lat, lon)`` can be expressed as an MGRS reference.

    Raises:
        InvalidCoordinateError: If the point is outside WGS 84 bounds or
            in a polar region (south of 80S or north of 84N).
    """
    validate_lat_lon(lat, lon)
    if not (UTM_MIN_LATITUDE <= lat <= UTM_MAX_LATITUDE):
        msg = (
            f"Latitude {lat} is outside MGRS/UTM coverage "
            f"[{UTM_MIN_LATITUDE}, {UTM_MAX_LATITUDE}]; polar regions are not supported"
        )
        raise InvalidCoordinateError(msg)
