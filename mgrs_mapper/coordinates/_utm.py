"""UTM zone selection and projection through pyproj.

Zone and band selection follow the MGRS rules, including the Norway
(32V) and Svalbard (31X-37X) zone exceptions.  Projection to and from
UTM uses ``pyproj.Transformer`` on the WGS 84 UTM CRSs
(``EPSG:326zz`` north, ``EPSG:327zz`` south); transformers are cached
per CRS and direction.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

from mgrs_mapper.coordinates._constants import (
    BAND_LETTERS,
    UTM_BAND_HEIGHT_DEG,
    UTM_MAX_LATITUDE,
    UTM_MIN_LATITUDE,
    UTM_ZONE_COUNT,
    UTM_ZONE_WIDTH_DEG,
)

if TYPE_CHECKING:
    from pyproj import Transformer


def utm_zone(lat: float, lon: float) -> int:
    """Return the MGRS UTM zone number (1-60) for a WGS 84 coordinate."""
    zone = int((lon + 180.0) / UTM_ZONE_WIDTH_DEG) + 1
    zone = max(1, min(UTM_ZONE_COUNT, zone))

    # Norway: zone 32V is widened westwards to 3E
    if 56.0 <= lat < 64.0 and 3.0 <= lon < 12.0:
        return 32

    # Svalbard: zones 32X, 34X and 36X are not used
    if 72.0 <= lat <= 84.0:
        if 0.0 <= lon < 9.0:
            return 31
        if 9.0 <= lon < 21.0:
            return 33
        if 21.0 <= lon < 33.0:
            return 35
        if 33.0 <= lon < 42.0:
            return 37

    return zone


def band_letter(lat: float) -> str:
    """Return the latitude band letter for *lat* (80S-84N)."""
    index = int((lat - UTM_MIN_LATITUDE) / UTM_BAND_HEIGHT_DEG)
    # Band X is 12 degrees tall; clamp 80N-84N into it
    index = max(0, min(len(BAND_LETTERS) - 1, index))
    return BAND_LETTERS[index]


def band_latitude_range(band: str) -> tuple[float, float]:
    """Return the ``(south, north)`` latitude limits of a band letter."""
    south = UTM_MIN_LATITUDE + BAND_LETTERS.index(band) * UTM_BAND_HEIGHT_DEG
    north = UTM_MAX_LATITUDE if band == BAND_LETTERS[-1] else south + UTM_BAND_HEIGHT_DEG
    return south, north


def is_northern_band(band: str) -> bool:
    """Whether *band* lies in the northern hemisphere (N and above)."""
    return band >= "N"


def utm_crs(zone: int, *, northern: bool) -> str:
    """Return the EPSG code of the WGS 84 UTM CRS for *zone*.

    Returns e.g. ``"EPSG:32615"`` (zone 15N) or ``"EPSG:32715"`` (zone 15S).
    """
    base = 32600 if northern else 32700
    return f"EPSG:{base + zone}"


@lru_cache(maxsize=128)
def _transformer(crs: str, *, inverse: bool) -> Transformer:
    from pyproj import Transformer

    if inverse:
        return Transformer.from_crs(crs, "EPSG:4326", always_xy=True)
    return Transformer.from_crs("EPSG:4326", crs, always_xy=True)


def utm_from_latlon(lat: float, lon: float) -> tuple[int, str, float, float]:
    """Project a WGS 84 coordinate to UTM.

    Callers must have validated UTM coverage first.

    Returns:
        ``(zone, band, easting, northing)`` in metres.  Southern
        northings include the 10,000 km false northing.
    """
    zone = utm_zone(lat, lon)
    band = band_letter(lat)
    crs = utm_crs(zone, northern=lat >= 0.0)
    easting, northing = _transformer(crs, inverse=False).transform(lon, lat)
    return zone, band, easting, northing


def latlon_from_utm(
    zone: int,
    easting: float,
    northing: float,
    *,
    northern: bool,
) -> tuple[float, float]:
    """Unproject a UTM coordinate back to WGS 84 ``(lat, lon)``."""
    crs = utm_crs(zone, northern=northern)
    lon, lat = _transformer(crs, inverse=True).transform(easting, northing)
    return lat, lon
