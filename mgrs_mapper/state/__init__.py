"""In-memory project state.

- repository: ordered AOI collection with write-through persistence
- selection: Idle / Selected / Editing state machine
- layers: AOI id -> render handle side mapping
- render: per-AOI render descriptors
"""

from __future__ import annotations

from mgrs_mapper.state.layers import LayerRegistry
from mgrs_mapper.state.render import PolygonStyle, RenderPolygon, render_polygons, style_for
from mgrs_mapper.state.repository import AOINotFoundError, AOIRepository
from mgrs_mapper.state.selection import (
    EditInProgressError,
    NoSelectionError,
    SelectionState,
    SelectionStateMachine,
)

__all__ = [
    "AOINotFoundError",
    "AOIRepository",
    "EditInProgressError",
    "LayerRegistry",
    "NoSelectionError",
    "PolygonStyle",
    "RenderPolygon",
    "SelectionState",
    "SelectionStateMachine",
    "render_polygons",
    "style_for",
]
