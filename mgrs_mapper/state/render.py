"""Render descriptors for the map surface.

One ``RenderPolygon`` per AOI: its ``(lat, lon)`` vertices, a style keyed
by selection state and a permanent centred label showing the name.

==========  ============  ======  =======  ====
State       stroke        weight  opacity  fill
==========  ============  ======  =======  ====
plain       ``#444``      3       0.8      0
selected    ``#444``      3       0.8      0.2
editing     ``red``       3       0.8      0
==========  ============  ======  =======  ====
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from mgrs_mapper.models.aoi import AOI
    from mgrs_mapper.state.selection import SelectionStateMachine

DEFAULT_STROKE_COLOR = "#444"
EDITING_STROKE_COLOR = "red"
STROKE_WEIGHT = 3
STROKE_OPACITY = 0.8
SELECTED_FILL_OPACITY = 0.2


@dataclass(frozen=True, slots=True)
class PolygonStyle:
    """Stroke and fill of a rendered AOI polygon."""

    color: str = DEFAULT_STROKE_COLOR
    weight: int = STROKE_WEIGHT
    opacity: float = STROKE_OPACITY
    fill_opacity: float = 0.0

    def to_dict(self) -> dict[str, object]:
        return {
            "color": self.color,
            "weight": self.weight,
            "opacity": self.opacity,
            "fillOpacity": self.fill_opacity,
        }


PLAIN_STYLE = PolygonStyle()
SELECTED_STYLE = PolygonStyle(fill_opacity=SELECTED_FILL_OPACITY)
EDITING_STYLE = PolygonStyle(color=EDITING_STROKE_COLOR)


@dataclass(frozen=True, slots=True)
class RenderPolygon:
    """Everything the map surface needs to draw one AOI."""

    aoi_id: str
    vertices: list[tuple[float, float]]
    style: PolygonStyle
    label: str
    selected: bool = False
    editing: bool = False


def style_for(selected: bool, editing: bool) -> PolygonStyle:
    """Return the polygon style for a selection state."""
    if editing:
        return EDITING_STYLE
    if selected:
        return SELECTED_STYLE
    return PLAIN_STYLE


def render_polygons(
    aois: Iterable[AOI],
    selection: SelectionStateMachine | None = None,
) -> list[RenderPolygon]:
    """Build render descriptors in display order."""
    selected_id = selection.selected_id if selection is not None else None
    editing_id = selection.editing_id if selection is not None else None

    polygons: list[RenderPolygon] = []
    for aoi in aois:
        selected = aoi.id == selected_id
        editing = aoi.id == editing_id
        polygons.append(
            RenderPolygon(
                aoi_id=aoi.id,
                vertices=aoi.lat_lon_vertices,
                style=style_for(selected, editing),
                label=aoi.name,
                selected=selected,
                editing=editing,
            )
        )
    return polygons
