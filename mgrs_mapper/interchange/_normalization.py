"""Coordinate and property normalisation helpers for GeoJSON import.

Responsibilities:
- Convert raw GeoJSON positions to clean ``(lon, lat)`` tuples
- Read optional Feature properties with the import defaults
"""

from __future__ import annotations

from mgrs_mapper.core.exceptions import ValidationError


class GeoJSONFormatError(ValidationError):
    """Raised when a document is not structurally valid GeoJSON."""

    default_stage = "interchange"
    default_code = "GEOJSON_FORMAT_INVALID"


# ---------------------------------------------------------------------------
# Coordinate normalisation
# ---------------------------------------------------------------------------


def coords_to_tuples(raw_coords: object) -> list[tuple[float, float]]:
    """Convert a GeoJSON linear ring to ``(lon, lat)`` tuples.

    Drops altitude (third element) if present.

    Raises:
        GeoJSONFormatError: If the ring or any position is malformed.
    """
    if not isinstance(raw_coords, list | tuple):
        msg = f"Polygon ring must be an array of positions, got {type(raw_coords).__name__}"
        raise GeoJSONFormatError(msg)
    coords: list[tuple[float, float]] = []
    for idx, c in enumerate(raw_coords):
        if not isinstance(c, list | tuple):
            msg = f"Malformed position at index {idx}: expected array, got {type(c).__name__}"
            raise GeoJSONFormatError(msg)
        if len(c) < 2:
            msg = f"Malformed position at index {idx}: expected at least 2 elements, got {len(c)}"
            raise GeoJSONFormatError(msg)
        if isinstance(c[0], bool) or isinstance(c[1], bool):
            msg = f"Malformed position at index {idx}: booleans are not coordinates"
            raise GeoJSONFormatError(msg)
        try:
            lon = float(c[0])
            lat = float(c[1])
        except (TypeError, ValueError) as exc:
            msg = (
                f"Malformed position at index {idx}: cannot convert to float "
                f"(lon={c[0]!r}, lat={c[1]!r})"
            )
            raise GeoJSONFormatError(msg) from exc
        coords.append((lon, lat))
    return coords


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


def property_text(properties: dict[str, object], key: str, default: str) -> str:
    """Return ``properties[key]`` as text, or *default* when missing or empty."""
    value = properties.get(key)
    if value is None or value == "":
        return default
    return str(value)
