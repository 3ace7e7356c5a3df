"""GeoJSON interchange for import and export.

- geojson: AOI <-> Feature conversion, FeatureCollection parsing/building
- files: export filenames and file read/write
- _normalization: position and property clean-up for import
"""

from __future__ import annotations

from mgrs_mapper.interchange._normalization import GeoJSONFormatError, coords_to_tuples
from mgrs_mapper.interchange.files import (
    FileReadError,
    FileWriteError,
    export_filename,
    looks_like_geojson,
    read_geojson_file,
    sanitize_project_name,
    write_geojson_file,
)
from mgrs_mapper.interchange.geojson import (
    NoImportableFeaturesError,
    UnsupportedGeometryError,
    aoi_to_feature,
    build_feature_collection,
    dumps_geojson,
    feature_to_aoi,
    features_from_document,
    loads_geojson,
    parse_feature_collection,
)

__all__ = [
    "FileReadError",
    "FileWriteError",
    "GeoJSONFormatError",
    "NoImportableFeaturesError",
    "UnsupportedGeometryError",
    "aoi_to_feature",
    "build_feature_collection",
    "coords_to_tuples",
    "dumps_geojson",
    "export_filename",
    "feature_to_aoi",
    "features_from_document",
    "loads_geojson",
    "looks_like_geojson",
    "parse_feature_collection",
    "read_geojson_file",
    "sanitize_project_name",
    "write_geojson_file",
]
