"""MGRS grid reference encoding and decoding.

An MGRS reference is ``{zone}{band}{column}{row}{easting}{northing}``,
for example ``"15TVK1234567890"``:

- zone (1-60) and latitude band letter,
- 100 km square column letter (three letter sets cycling by zone),
- 100 km square row letter (20 letters cycling every 2,000 km; even
  zones are offset by five letters),
- equal-length easting and northing digit groups, 0-5 digits each
  (5 digits = 1 m, 4 = 10 m, ... 0 = the whole 100 km square).

Conventions:
- Encoding truncates the UTM remainder to the requested precision.
- Decoding returns the **centre** of the precision cell, so a 10-digit
  reference round-trips to within a metre and re-encodes to itself.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from mgrs_mapper.coordinates._constants import (
    BAND_CHECK_TOLERANCE_DEG,
    BAND_LETTERS,
    BAND_MIN_NORTHING,
    COLUMN_LETTER_SETS,
    EVEN_ZONE_ROW_OFFSET,
    MAX_PRECISION,
    NONEXISTENT_X_ZONES,
    ONE_HUNDRED_KM,
    ROW_CYCLE_M,
    ROW_LETTERS,
    UTM_ZONE_COUNT,
)
from mgrs_mapper.coordinates._utm import (
    band_latitude_range,
    is_northern_band,
    latlon_from_utm,
    utm_from_latlon,
)
from mgrs_mapper.coordinates._validation import (
    InvalidCoordinateError,
    InvalidMGRSFormatError,
    validate_utm_coverage,
)
from mgrs_mapper.core.constants import DEFAULT_MGRS_PRECISION

logger = logging.getLogger("mgrs_mapper.coordinates.mgrs")

_MGRS_PATTERN = re.compile(r"^(\d{1,2})([A-Z])([A-Z])([A-Z])(.*)$")


@dataclass(frozen=True, slots=True)
class MGRSReference:
    """Parsed components of an MGRS reference.

    Attributes:
        zone: UTM zone number (1-60).
        band: Latitude band letter.
        column: 100 km square column letter.
        row: 100 km square row letter.
        easting: Easting within the 100 km square, in metres (cell corner).
        northing: Northing within the 100 km square, in metres (cell corner).
        precision: Digits per easting/northing group (0-5).
    """

    zone: int
    band: str
    column: str
    row: str
    easting: int
    northing: int
    precision: int

    @property
    def cell_size_m(self) -> int:
        """Edge length of the precision cell in metres."""
        return 10 ** (MAX_PRECISION - self.precision)

    @property
    def grid_zone(self) -> str:
        """Grid zone designator, e.g. ``"15T"``."""
        return f"{self.zone}{self.band}"

    def __str__(self) -> str:
        if self.precision == 0:
            digits = ""
        else:
            cell = self.cell_size_m
            digits = (
                f"{self.easting // cell:0{self.precision}d}"
                f"{self.northing // cell:0{self.precision}d}"
            )
        return f"{self.zone}{self.band}{self.column}{self.row}{digits}"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def to_mgrs(lat: float, lon: float, precision: int = DEFAULT_MGRS_PRECISION) -> str:
    """Convert a WGS 84 coordinate to an MGRS reference string.

    Args:
        lat: Latitude in degrees, -80 to 84.
        lon: Longitude in degrees, -180 to 180.
        precision: Digits per easting/northing group (5 = 1 m).

    Returns:
        MGRS string without spaces (e.g. ``"18SUJ2338706880"``).

    Raises:
        InvalidCoordinateError: If the coordinate is out of range or in a
            polar region MGRS/UTM cannot represent.
        ValueError: If *precision* is not between 0 and 5.
    """
    if not 0 <= precision <= MAX_PRECISION:
        msg = f"MGRS precision must be between 0 and {MAX_PRECISION}, got {precision}"
        raise ValueError(msg)

    validate_utm_coverage(lat, lon)
    zone, band, easting, northing = utm_from_latlon(lat, lon)

    column_index = int(easting // ONE_HUNDRED_KM) - 1
    column_letters = COLUMN_LETTER_SETS[(zone - 1) % len(COLUMN_LETTER_SETS)]
    if not 0 <= column_index < len(column_letters):
        msg = f"Easting {easting:.0f} m for ({lat}, {lon}) is outside zone {zone}"
        raise InvalidCoordinateError(msg)

    row_index = int(northing // ONE_HUNDRED_KM) % len(ROW_LETTERS)
    if zone % 2 == 0:
        row_index = (row_index + EVEN_ZONE_ROW_OFFSET) % len(ROW_LETTERS)

    reference = MGRSReference(
        zone=zone,
        band=band,
        column=column_letters[column_index],
        row=ROW_LETTERS[row_index],
        easting=int(easting % ONE_HUNDRED_KM),
        northing=int(northing % ONE_HUNDRED_KM),
        precision=precision,
    )
    return str(reference)


def parse_mgrs(text: str) -> MGRSReference:
    """Parse an MGRS string into its components.

    Whitespace is ignored and letters are case-insensitive.

    Raises:
        InvalidMGRSFormatError: If any component is malformed.
    """
    if not isinstance(text, str):
        msg = f"MGRS reference must be a string, got {type(text).__name__}"
        raise InvalidMGRSFormatError(msg)

    compact = "".join(text.split()).upper()
    match = _MGRS_PATTERN.match(compact)
    if match is None:
        msg = f"Invalid MGRS reference {text!r}: expected zone, band and 100 km square letters"
        raise InvalidMGRSFormatError(msg)

    zone_text, band, column, row, digits = match.groups()

    zone = int(zone_text)
    if not 1 <= zone <= UTM_ZONE_COUNT:
        msg = f"Invalid MGRS reference {text!r}: zone {zone} is not between 1 and {UTM_ZONE_COUNT}"
        raise InvalidMGRSFormatError(msg)

    if band not in BAND_LETTERS:
        msg = f"Invalid MGRS reference {text!r}: unknown latitude band {band!r}"
        raise InvalidMGRSFormatError(msg)

    if band == "X" and zone in NONEXISTENT_X_ZONES:
        msg = f"Invalid MGRS reference {text!r}: grid zone {zone}X does not exist"
        raise InvalidMGRSFormatError(msg)

    column_letters = COLUMN_LETTER_SETS[(zone - 1) % len(COLUMN_LETTER_SETS)]
    if column not in column_letters:
        msg = f"Invalid MGRS reference {text!r}: column letter {column!r} is not used in zone {zone}"
        raise InvalidMGRSFormatError(msg)

    if row not in ROW_LETTERS:
        msg = f"Invalid MGRS reference {text!r}: unknown row letter {row!r}"
        raise InvalidMGRSFormatError(msg)

    if digits and not (digits.isascii() and digits.isdigit()):
        msg = f"Invalid MGRS reference {text!r}: easting/northing must be numeric"
        raise InvalidMGRSFormatError(msg)

    if len(digits) % 2 != 0:
        msg = f"Invalid MGRS reference {text!r}: easting and northing need the same digit count"
        raise InvalidMGRSFormatError(msg)

    precision = len(digits) // 2
    if precision > MAX_PRECISION:
        msg = (
            f"Invalid MGRS reference {text!r}: precision of {precision} digits "
            f"exceeds the supported {MAX_PRECISION}"
        )
        raise InvalidMGRSFormatError(msg)

    cell = 10 ** (MAX_PRECISION - precision)
    easting = int(digits[:precision]) * cell if precision else 0
    northing = int(digits[precision:]) * cell if precision else 0

    return MGRSReference(
        zone=zone,
        band=band,
        column=column,
        row=row,
        easting=easting,
        northing=northing,
        precision=precision,
    )


def from_mgrs(text: str) -> tuple[float, float]:
    """Convert an MGRS string to the ``(lat, lon)`` centre of its cell.

    Raises:
        InvalidMGRSFormatError: If the string is malformed, or its 100 km
            square does not lie in the stated latitude band.
    """
    reference = parse_mgrs(text)
    easting, northing = _utm_position(reference)
    half_cell = reference.cell_size_m / 2.0

    lat, lon = latlon_from_utm(
        reference.zone,
        easting + half_cell,
        northing + half_cell,
        northern=is_northern_band(reference.band),
    )

    # The cell centre may sit up to half a cell outside the band it touches
    south, north = band_latitude_range(reference.band)
    slack = half_cell / ONE_HUNDRED_KM + BAND_CHECK_TOLERANCE_DEG
    if not south - slack <= lat <= north + slack:
        msg = (
            f"Invalid MGRS reference {text!r}: row {reference.row} places it at "
            f"latitude {lat:.4f}, outside band {reference.band} [{south}, {north}]"
        )
        raise InvalidMGRSFormatError(msg)

    logger.debug(
        "MGRS decoded | mgrs=%s | lat=%.6f | lon=%.6f | cell=%d m",
        text,
        lat,
        lon,
        reference.cell_size_m,
    )
    return lat, lon


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _utm_position(reference: MGRSReference) -> tuple[float, float]:
    """Return the full UTM easting/northing of the cell's south-west corner."""
    column_letters = COLUMN_LETTER_SETS[(reference.zone - 1) % len(COLUMN_LETTER_SETS)]
    easting = (column_letters.index(reference.column) + 1) * ONE_HUNDRED_KM + reference.easting

    row_index = ROW_LETTERS.index(reference.row)
    if reference.zone % 2 == 0:
        row_index = (row_index - EVEN_ZONE_ROW_OFFSET) % len(ROW_LETTERS)
    northing = row_index * ONE_HUNDRED_KM + reference.northing

    # Lift into the 2,000 km cycle that contains the latitude band
    min_northing = BAND_MIN_NORTHING[reference.band]
    while northing < min_northing:
        northing += ROW_CYCLE_M

    return float(easting), float(northing)
