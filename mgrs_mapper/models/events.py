"""Completion events emitted by the drawing surface.

The draw toolbar reports finished gestures as one of three event kinds,
modelled as a closed union so consumers can ``match`` exhaustively:

- ``Created``: a new polygon was drawn.
- ``Edited``: the polygon of the AOI in edit mode was reshaped.
- ``EditCancelled``: edit mode was left without a new geometry.

All vertices are ``(lat, lon)`` tuples, the order the map widget uses.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Created:
    """A new polygon finished drawing, optionally with a name for the AOI."""

    vertices: list[tuple[float, float]] = field(default_factory=list)
    name: str | None = None


@dataclass(frozen=True, slots=True)
class Edited:
    """The AOI ``aoi_id`` was reshaped to ``vertices``."""

    aoi_id: str
    vertices: list[tuple[float, float]] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class EditCancelled:
    """Edit mode on ``aoi_id`` ended without a geometry change."""

    aoi_id: str


DrawEvent = Created | Edited | EditCancelled
