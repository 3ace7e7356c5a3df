"""Shared constants for the MGRS / UTM codec."""

from __future__ import annotations

# WGS 84 coordinate bounds
MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0
MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0

# UTM coverage; polar regions belong to UPS, which is not supported
UTM_MIN_LATITUDE = -80.0
UTM_MAX_LATITUDE = 84.0

UTM_ZONE_COUNT = 60
UTM_ZONE_WIDTH_DEG = 6.0
UTM_BAND_HEIGHT_DEG = 8.0

# Latitude band letters, 8 degrees each from 80S (X spans 72N-84N)
BAND_LETTERS = "CDEFGHJKLMNPQRSTUVWX"

# 100 km column letters, cycling every three zones
COLUMN_LETTER_SETS = ("ABCDEFGH", "JKLMNPQR", "STUVWXYZ")

# 100 km row letters, cycling every 2,000 km of northing
ROW_LETTERS = "ABCDEFGHJKLMNPQRSTUV"

# Even-numbered zones start their row lettering at "F"
EVEN_ZONE_ROW_OFFSET = 5

ONE_HUNDRED_KM = 100_000
ROW_CYCLE_M = 2_000_000

MAX_PRECISION = 5

# Lowest UTM northing (metres) reached inside each latitude band,
# rounded down to 100 km.  Southern values include the 10,000 km
# false northing.
BAND_MIN_NORTHING = {
    "C": 1_100_000,
    "D": 2_000_000,
    "E": 2_800_000,
    "F": 3_700_000,
    "G": 4_600_000,
    "H": 5_500_000,
    "J": 6_400_000,
    "K": 7_300_000,
    "L": 8_200_000,
    "M": 9_100_000,
    "N": 0,
    "P": 800_000,
    "Q": 1_700_000,
    "R": 2_600_000,
    "S": 3_500_000,
    "T": 4_400_000,
    "U": 5_300_000,
    "V": 6_200_000,
    "W": 7_000_000,
    "X": 7_900_000,
}

# Grid zones 32X, 34X and 36X do not exist (Svalbard widening)
NONEXISTENT_X_ZONES = frozenset({32, 34, 36})

# Slack (degrees) allowed when checking a decoded cell against its band
BAND_CHECK_TOLERANCE_DEG = 0.25
