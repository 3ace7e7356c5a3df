"""Shared pytest fixtures for the MGRS mapper test suite."""

from __future__ import annotations

import copy
import itertools
from collections.abc import Callable
from datetime import UTC, datetime

import pytest

from mgrs_mapper.core.config import MapperConfig
from mgrs_mapper.session import MapSession
from mgrs_mapper.state import AOIRepository, SelectionStateMachine
from mgrs_mapper.storage import MemoryStore, PersistenceAdapter

FIXED_NOW = datetime(2024, 6, 1, 12, 30, 0, tzinfo=UTC)
FIXED_NOW_ISO = "2024-06-01T12:30:00.000Z"

# ---------------------------------------------------------------------------
# Sample boundaries, (lat, lon)
# ---------------------------------------------------------------------------

# 1 x 1 degree rectangle in South Dakota / Minnesota
RECTANGLE = [(45.0, -100.0), (45.0, -99.0), (46.0, -99.0), (46.0, -100.0)]

# Small triangle near Minneapolis
TRIANGLE = [(44.97, -93.27), (44.98, -93.25), (44.99, -93.27)]

# GeoJSON document with one Polygon and one Point Feature
POLYGON_AND_POINT_COLLECTION = {
    "type": "FeatureCollection",
    "features": [
        {
            "type": "Feature",
            "geometry": {
                "type": "Polygon",
                "coordinates": [[[-99, 45], [-99, 46], [-98, 46], [-98, 45], [-99, 45]]],
            },
            "properties": {"name": "Field 7"},
        },
        {
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [-98.5, 45.5]},
            "properties": {"name": "Marker"},
        },
    ],
}


# ---------------------------------------------------------------------------
# Deterministic clock and ids
# ---------------------------------------------------------------------------


@pytest.fixture()
def clock() -> Callable[[], datetime]:
    """Clock frozen at 2024-06-01 12:30 UTC."""
    return lambda: FIXED_NOW


@pytest.fixture()
def id_factory() -> Callable[[], str]:
    """Sequential ids: ``aoi-1``, ``aoi-2``, ..."""
    counter = itertools.count(1)
    return lambda: f"aoi-{next(counter)}"


# ---------------------------------------------------------------------------
# Storage and state
# ---------------------------------------------------------------------------


@pytest.fixture()
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture()
def adapter(memory_store: MemoryStore) -> PersistenceAdapter:
    return PersistenceAdapter(memory_store)


@pytest.fixture()
def repository(
    adapter: PersistenceAdapter,
    clock: Callable[[], datetime],
    id_factory: Callable[[], str],
) -> AOIRepository:
    return AOIRepository(adapter, clock=clock, id_factory=id_factory)


@pytest.fixture()
def selection(repository: AOIRepository) -> SelectionStateMachine:
    return SelectionStateMachine(repository)


@pytest.fixture()
def config(tmp_path) -> MapperConfig:
    """Memory-backed configuration exporting into ``tmp_path``."""
    return MapperConfig(store="memory", export_dir=str(tmp_path / "exports"))


@pytest.fixture()
def session(
    config: MapperConfig,
    memory_store: MemoryStore,
    clock: Callable[[], datetime],
    id_factory: Callable[[], str],
) -> MapSession:
    return MapSession.open(config, memory_store, clock=clock, id_factory=id_factory)


# ---------------------------------------------------------------------------
# Sample data fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def rectangle() -> list[tuple[float, float]]:
    """1 x 1 degree ``(lat, lon)`` rectangle centred on (45.5, -99.5)."""
    return list(RECTANGLE)


@pytest.fixture()
def triangle() -> list[tuple[float, float]]:
    """Small ``(lat, lon)`` triangle near Minneapolis."""
    return list(TRIANGLE)


@pytest.fixture()
def polygon_and_point_collection() -> dict:
    """FeatureCollection with one Polygon and one Point Feature."""
    return copy.deepcopy(POLYGON_AND_POINT_COLLECTION)
