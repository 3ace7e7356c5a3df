"""Pydantic models for the exported GeoJSON document.

Defines the FeatureCollection written by the export action:

- **AOIFeature**: one ``Polygon`` Feature per AOI, with the AOI's
  identity and derived fields carried in ``properties``.
- **AOIFeatureCollection**: all AOIs of a project plus top-level
  ``properties`` (``projectName``, ``exportDate``).

Wire keys are camelCase (``mgrsCoordinate``, ``dateCreated``,
``projectName``) to stay compatible with files produced by the browser
application; Python attributes are snake_case with aliases.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class PolygonGeometry(BaseModel):
    """GeoJSON ``Polygon`` geometry.

    Attributes:
        type: Always ``"Polygon"``.
        coordinates: ``[exterior_ring]`` where the ring is a closed list of
            ``[lon, lat]`` pairs.
    """

    type: Literal["Polygon"] = "Polygon"
    coordinates: list[list[list[float]]] = Field(default_factory=list)


class AOIProperties(BaseModel):
    """Feature ``properties`` block for one AOI."""

    id: str
    name: str
    mgrs_coordinate: str = Field(default="", alias="mgrsCoordinate")
    dimensions: str = ""
    date_created: str = Field(default="", alias="dateCreated")

    model_config = {"populate_by_name": True}


class AOIFeature(BaseModel):
    """GeoJSON Feature wrapping one AOI."""

    type: Literal["Feature"] = "Feature"
    geometry: PolygonGeometry = Field(default_factory=PolygonGeometry)
    properties: AOIProperties


class CollectionProperties(BaseModel):
    """Top-level ``properties`` of an export document."""

    project_name: str = Field(default="", alias="projectName")
    export_date: str = Field(default="", alias="exportDate")

    model_config = {"populate_by_name": True}


class AOIFeatureCollection(BaseModel):
    """Complete export document: every AOI of a project."""

    type: Literal["FeatureCollection"] = "FeatureCollection"
    properties: CollectionProperties = Field(default_factory=CollectionProperties)
    features: list[AOIFeature] = Field(default_factory=list)

    def to_json(self, *, indent: int = 2) -> str:
        """Serialise to a pretty-printed JSON string with camelCase keys."""
        return self.model_dump_json(indent=indent, by_alias=True)

    def to_dict(self) -> dict[str, object]:
        """Serialise to a plain dict with camelCase keys."""
        return self.model_dump(by_alias=True)  # type: ignore[return-value]
