"""Shared constants used across the mapper layers.

Centralises durable-store keys, default names, and the GeoJSON file
conventions used by the interchange and session layers.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Durable store layout
# ---------------------------------------------------------------------------

AOI_STORAGE_KEY: str = "mgrs-map-aois"
"""Store key holding the serialised AOI array."""

PROJECT_NAME_STORAGE_KEY: str = "mgrs-map-project-name"
"""Store key holding the plain project-name string."""

# ---------------------------------------------------------------------------
# Naming defaults
# ---------------------------------------------------------------------------

DEFAULT_PROJECT_NAME: str = "Untitled Project"
DEFAULT_AOI_NAME_TEMPLATE: str = "AOI {n}"
IMPORTED_AOI_NAME: str = "Imported AOI"

# ---------------------------------------------------------------------------
# Geometry defaults
# ---------------------------------------------------------------------------

DEFAULT_SQUARE_HALF_WIDTH_DEG: float = 0.01
"""Half width (degrees) of the square synthesised for manual MGRS entries."""

DEFAULT_MGRS_PRECISION: int = 5
"""Digit pairs in generated MGRS strings (5 = 1 m)."""

# ---------------------------------------------------------------------------
# GeoJSON files
# ---------------------------------------------------------------------------

GEOJSON_EXTENSION: str = ".geojson"
GEOJSON_MEDIA_TYPE: str = "application/geo+json"
EXPORT_FILENAME_TEMPLATE: str = "{project}_aois_{day}.geojson"
