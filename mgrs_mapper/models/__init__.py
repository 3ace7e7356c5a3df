"""Data models and schemas.

Defines the data structures shared by every layer:
- AOI: Named polygon with MGRS centroid and area summary
- Project: Project name plus ordered AOIs
- DrawEvent: Created / Edited / EditCancelled drawing events
- AOIFeatureCollection: Pydantic schema of the GeoJSON export document
"""

from mgrs_mapper.models.aoi import AOI
from mgrs_mapper.models.events import Created, DrawEvent, EditCancelled, Edited
from mgrs_mapper.models.project import Project

__all__ = [
    "AOI",
    "Created",
    "DrawEvent",
    "EditCancelled",
    "Edited",
    "Project",
]
