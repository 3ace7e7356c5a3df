"""GeoJSON interchange: AOI records to and from GeoJSON Features.

Export wraps every AOI of a project in one FeatureCollection whose
top-level ``properties`` carry ``projectName`` and ``exportDate``.  Each
AOI becomes a ``Polygon`` Feature; its ring is the stored ``(lon, lat)``
boundary, closed as GeoJSON requires.

Import accepts a FeatureCollection or a single Feature:

- Features whose geometry is not a ``Polygon`` are skipped silently.
- If no importable Feature remains, the whole import fails with
  ``NoImportableFeaturesError``.
- Any invalid Polygon aborts the whole import; nothing is returned, so
  nothing reaches the repository.
- Missing properties are defaulted: a fresh ``id``, ``"Imported AOI"``
  as ``name``, empty ``mgrsCoordinate`` / ``dimensions``, and the
  current time as ``dateCreated``.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from mgrs_mapper.core.constants import IMPORTED_AOI_NAME
from mgrs_mapper.core.exceptions import ValidationError
from mgrs_mapper.geometry import to_lat_lon, to_lon_lat, validate_vertices
from mgrs_mapper.interchange._normalization import (
    GeoJSONFormatError,
    coords_to_tuples,
    property_text,
)
from mgrs_mapper.models.aoi import AOI
from mgrs_mapper.models.geojson import (
    AOIFeature,
    AOIFeatureCollection,
    AOIProperties,
    CollectionProperties,
    PolygonGeometry,
)
from mgrs_mapper.utils.helpers import isoformat_utc, new_aoi_id, utc_now

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from datetime import datetime

logger = logging.getLogger("mgrs_mapper.interchange.geojson")

POLYGON = "Polygon"
FEATURE = "Feature"
FEATURE_COLLECTION = "FeatureCollection"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class UnsupportedGeometryError(ValidationError):
    """Raised when a Feature's geometry is not a Polygon."""

    default_stage = "interchange"
    default_code = "GEOMETRY_UNSUPPORTED"


class NoImportableFeaturesError(ValidationError):
    """Raised when a document contains no Polygon Feature."""

    default_stage = "interchange"
    default_code = "NO_IMPORTABLE_FEATURES"


# ---------------------------------------------------------------------------
# AOI -> GeoJSON
# ---------------------------------------------------------------------------


def _closed_ring(bounds: list[tuple[float, float]]) -> list[list[float]]:
    ring = [[lon, lat] for lon, lat in bounds]
    if ring and ring[0] != ring[-1]:
        ring.append(list(ring[0]))
    return ring


def _feature_model(aoi: AOI) -> AOIFeature:
    return AOIFeature(
        geometry=PolygonGeometry(coordinates=[_closed_ring(aoi.bounds)]),
        properties=AOIProperties(
            id=aoi.id,
            name=aoi.name,
            mgrs_coordinate=aoi.mgrs_coordinate,
            dimensions=aoi.dimensions,
            date_created=aoi.date_created,
        ),
    )


def aoi_to_feature(aoi: AOI) -> dict[str, object]:
    """Convert an AOI to a GeoJSON ``Polygon`` Feature dict."""
    return _feature_model(aoi).model_dump(by_alias=True)  # type: ignore[return-value]


def build_feature_collection(
    aois: Iterable[AOI],
    project_name: str,
    export_date: datetime | None = None,
) -> AOIFeatureCollection:
    """Wrap every AOI in one FeatureCollection with project properties.

    Args:
        aois: AOIs in display order.
        project_name: Written to ``properties.projectName``.
        export_date: Written to ``properties.exportDate``; defaults to now.
    """
    moment = export_date or utc_now()
    return AOIFeatureCollection(
        properties=CollectionProperties(
            project_name=project_name,
            export_date=isoformat_utc(moment),
        ),
        features=[_feature_model(aoi) for aoi in aois],
    )


def dumps_geojson(
    aois: Iterable[AOI],
    project_name: str,
    export_date: datetime | None = None,
) -> str:
    """Serialise a project export as pretty-printed GeoJSON text."""
    return build_feature_collection(aois, project_name, export_date).to_json(indent=2)


# ---------------------------------------------------------------------------
# GeoJSON -> AOI
# ---------------------------------------------------------------------------


def feature_to_aoi(
    feature: dict[str, object],
    *,
    id_factory: Callable[[], str] = new_aoi_id,
    now: Callable[[], datetime] = utc_now,
) -> AOI:
    """Convert a GeoJSON ``Polygon`` Feature to an AOI.

    Only the first (exterior) ring is used; its closing vertex is dropped.

    Raises:
        UnsupportedGeometryError: If the geometry is missing or not a Polygon.
        GeoJSONFormatError: If the coordinates are malformed.
        InvalidCoordinateError: If a position is outside WGS 84 bounds.
        AOIGeometryError: If the ring has fewer than three distinct vertices.
    """
    if not isinstance(feature, dict):
        msg = f"GeoJSON Feature must be an object, got {type(feature).__name__}"
        raise GeoJSONFormatError(msg)

    geometry = feature.get("geometry")
    geometry_type = geometry.get("type") if isinstance(geometry, dict) else None
    if geometry_type != POLYGON:
        msg = f"Only Polygon geometries are supported, got {geometry_type!r}"
        raise UnsupportedGeometryError(msg)

    rings = geometry.get("coordinates")  # type: ignore[union-attr]
    if not isinstance(rings, list) or not rings:
        msg = "Polygon has no coordinate rings"
        raise GeoJSONFormatError(msg)

    raw_properties = feature.get("properties")
    properties: dict[str, object] = raw_properties if isinstance(raw_properties, dict) else {}
    name = property_text(properties, "name", IMPORTED_AOI_NAME)

    exterior = coords_to_tuples(rings[0])
    ring = validate_vertices(to_lat_lon(exterior), f"imported feature '{name}'")

    return AOI(
        id=property_text(properties, "id", "") or id_factory(),
        name=name,
        mgrs_coordinate=property_text(properties, "mgrsCoordinate", ""),
        dimensions=property_text(properties, "dimensions", ""),
        bounds=to_lon_lat(ring),
        date_created=property_text(properties, "dateCreated", "") or isoformat_utc(now()),
    )


def features_from_document(document: object) -> list[dict[str, object]]:
    """Return the Feature objects of a FeatureCollection or single Feature.

    Other GeoJSON types contribute no Features.

    Raises:
        GeoJSONFormatError: If the document has no ``type`` or a
            FeatureCollection lacks a ``features`` array.
    """
    if not isinstance(document, dict) or not document.get("type"):
        msg = "Invalid GeoJSON: missing type property"
        raise GeoJSONFormatError(msg)

    doc_type = document["type"]
    if doc_type == FEATURE_COLLECTION:
        features = document.get("features")
        if not isinstance(features, list):
            msg = "Invalid GeoJSON: FeatureCollection has no features array"
            raise GeoJSONFormatError(msg)
        return [f for f in features if isinstance(f, dict)]
    if doc_type == FEATURE:
        return [document]
    return []


def parse_feature_collection(
    document: object,
    *,
    id_factory: Callable[[], str] = new_aoi_id,
    now: Callable[[], datetime] = utc_now,
) -> list[AOI]:
    """Convert every Polygon Feature of a parsed GeoJSON document.

    Raises:
        GeoJSONFormatError: If the document is structurally invalid.
        NoImportableFeaturesError: If no Polygon Feature is present.
        UnsupportedGeometryError, InvalidCoordinateError, AOIGeometryError:
            From ``feature_to_aoi``; the whole import is aborted.
    """
    features = features_from_document(document)
    if not features:
        msg = "No valid features found in GeoJSON"
        raise NoImportableFeaturesError(msg)

    polygons = [
        f
        for f in features
        if isinstance(f.get("geometry"), dict) and f["geometry"].get("type") == POLYGON  # type: ignore[union-attr]
    ]
    skipped = len(features) - len(polygons)
    if skipped:
        logger.info("Skipping non-Polygon features | skipped=%d", skipped)
    if not polygons:
        msg = "No Polygon features found in GeoJSON"
        raise NoImportableFeaturesError(msg)

    aois = [feature_to_aoi(f, id_factory=id_factory, now=now) for f in polygons]
    logger.info("GeoJSON parsed | features=%d | aois=%d", len(features), len(aois))
    return aois


def loads_geojson(
    text: str,
    *,
    id_factory: Callable[[], str] = new_aoi_id,
    now: Callable[[], datetime] = utc_now,
) -> list[AOI]:
    """Parse GeoJSON text into AOIs.

    Raises:
        GeoJSONFormatError: If *text* is not valid JSON.
        NoImportableFeaturesError: See ``parse_feature_collection``.
    """
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        msg = f"Invalid GeoJSON file: {exc}"
        raise GeoJSONFormatError(msg) from exc
    return parse_feature_collection(document, id_factory=id_factory, now=now)
