"""Tests for the AOI repository.

Covers:
- Creation from drawn boundaries and manual MGRS entries
- Default names, unique ids and timestamps
- Rename, boundary update, reorder and deletion
- Write-through persistence after every mutation
- Atomicity: failed operations leave the collection unchanged
- Render-handle release and removal notifications
"""

from __future__ import annotations

import itertools
import json
from unittest.mock import MagicMock

import pytest

from mgrs_mapper.coordinates import InvalidCoordinateError, InvalidMGRSFormatError, from_mgrs, to_mgrs
from mgrs_mapper.geometry import AOIGeometryError, mean_center
from mgrs_mapper.models.aoi import AOI
from mgrs_mapper.state import AOINotFoundError, AOIRepository
from mgrs_mapper.storage import MemoryStore, PersistenceAdapter


def _stored_records(store: MemoryStore) -> list[dict]:
    raw = store.get_item("mgrs-map-aois")
    return json.loads(raw) if raw else []


class TestCreate:
    """Creating AOIs from drawn boundaries."""

    def test_rectangle_scenario(self, repository: AOIRepository, rectangle) -> None:
        aoi = repository.create(rectangle)
        assert aoi.mgrs_coordinate == to_mgrs(45.5, -99.5)
        area = float(aoi.dimensions.removesuffix(" sq m"))
        assert 1e9 < area < 1e11
        assert aoi.dimensions.endswith(" sq m")

    def test_bounds_stored_lon_lat(self, repository: AOIRepository, rectangle) -> None:
        aoi = repository.create(rectangle)
        assert aoi.bounds == [(-100.0, 45.0), (-99.0, 45.0), (-99.0, 46.0), (-100.0, 46.0)]

    def test_closing_vertex_dropped(self, repository: AOIRepository, rectangle) -> None:
        aoi = repository.create([*rectangle, rectangle[0]])
        assert aoi.vertex_count == 4

    def test_default_names_count_up(self, repository: AOIRepository, triangle) -> None:
        first = repository.create(triangle)
        second = repository.create(triangle)
        assert (first.name, second.name) == ("AOI 1", "AOI 2")

    def test_default_name_uses_current_size(self, repository: AOIRepository, triangle) -> None:
        first = repository.create(triangle)
        repository.create(triangle)
        repository.delete(first.id)
        assert repository.create(triangle).name == "AOI 2"

    def test_name_override(self, repository: AOIRepository, triangle) -> None:
        assert repository.create(triangle, name="  Landing  ").name == "Landing"

    def test_blank_name_override_uses_default(self, repository: AOIRepository, triangle) -> None:
        assert repository.create(triangle, name="  ").name == "AOI 1"

    def test_timestamp_from_clock(self, repository: AOIRepository, triangle) -> None:
        assert repository.create(triangle).date_created == "2024-06-01T12:30:00.000Z"

    def test_appends_in_display_order(self, repository: AOIRepository, triangle, rectangle) -> None:
        a = repository.create(triangle)
        b = repository.create(rectangle)
        assert [x.id for x in repository] == [a.id, b.id]

    def test_persists(self, repository: AOIRepository, memory_store: MemoryStore, triangle) -> None:
        aoi = repository.create(triangle)
        assert [r["id"] for r in _stored_records(memory_store)] == [aoi.id]

    def test_invalid_boundary_leaves_collection_unchanged(
        self, repository: AOIRepository, memory_store: MemoryStore, triangle
    ) -> None:
        repository.create(triangle)
        before = memory_store.get_item("mgrs-map-aois")
        with pytest.raises(AOIGeometryError):
            repository.create([(0.0, 0.0), (1.0, 1.0)])
        with pytest.raises(InvalidCoordinateError):
            repository.create([(0.0, 0.0), (1.0, 1.0), (100.0, 1.0)])
        assert len(repository) == 1
        assert memory_store.get_item("mgrs-map-aois") == before

    def test_polar_centroid_rejected(self, repository: AOIRepository) -> None:
        with pytest.raises(InvalidCoordinateError):
            repository.create([(85.0, 0.0), (85.0, 1.0), (86.0, 1.0)])
        assert len(repository) == 0


class TestUniqueIds:
    """Ids never collide."""

    def test_ids_unique_across_creates_and_deletes(self, repository: AOIRepository, triangle) -> None:
        for i in range(10):
            aoi = repository.create(triangle)
            assert aoi.id not in {a.id for a in repository if a is not aoi}
            if i % 3 == 0:
                repository.delete(aoi.id)
        assert len({a.id for a in repository}) == len(repository)

    def test_colliding_factory_ids_are_skipped(self, adapter: PersistenceAdapter, triangle) -> None:
        ids = iter(["same", "same", "other"])
        repo = AOIRepository(adapter, id_factory=lambda: next(ids))
        first = repo.create(triangle)
        second = repo.create(triangle)
        assert (first.id, second.id) == ("same", "other")

    def test_default_ids_are_uuids(self, adapter: PersistenceAdapter, triangle) -> None:
        repo = AOIRepository(adapter)
        a, b = repo.create(triangle), repo.create(triangle)
        assert a.id != b.id
        assert len(a.id) == 36


class TestCreateFromMgrs:
    """Manual MGRS entry."""

    def test_square_centred_on_decoded_point(self, repository: AOIRepository) -> None:
        aoi = repository.create_from_mgrs("15TVK1234567890")
        assert aoi.vertex_count == 4
        lat, lon = from_mgrs("15TVK1234567890")
        centre_lat, centre_lon = mean_center(aoi.lat_lon_vertices)
        assert centre_lat == pytest.approx(lat)
        assert centre_lon == pytest.approx(lon)

    def test_square_half_width(self, repository: AOIRepository) -> None:
        aoi = repository.create_from_mgrs("15TVK1234567890")
        lats = [lat for lat, _ in aoi.lat_lon_vertices]
        lons = [lon for _, lon in aoi.lat_lon_vertices]
        assert max(lats) - min(lats) == pytest.approx(0.02)
        assert max(lons) - min(lons) == pytest.approx(0.02)

    def test_custom_half_width(self, repository: AOIRepository) -> None:
        aoi = repository.create_from_mgrs("15TVK1234567890", half_width_deg=0.05)
        lats = [lat for lat, _ in aoi.lat_lon_vertices]
        assert max(lats) - min(lats) == pytest.approx(0.1)

    def test_fields(self, repository: AOIRepository) -> None:
        aoi = repository.create_from_mgrs("15t vk 12345 67890")
        assert aoi.mgrs_coordinate == "15TVK1234567890"
        assert aoi.dimensions == ""
        assert aoi.name == "AOI 1"
        assert aoi.date_created == "2024-06-01T12:30:00.000Z"

    def test_invalid_text(self, repository: AOIRepository) -> None:
        with pytest.raises(InvalidMGRSFormatError):
            repository.create_from_mgrs("15TVK123")
        assert len(repository) == 0


class TestRename:
    """Renaming."""

    def test_rename_trims_and_persists(
        self, repository: AOIRepository, memory_store: MemoryStore, triangle
    ) -> None:
        aoi = repository.create(triangle)
        renamed = repository.rename(aoi.id, "  North field ")
        assert renamed.name == "North field"
        assert repository.get(aoi.id).name == "North field"
        assert _stored_records(memory_store)[0]["name"] == "North field"

    def test_blank_keeps_previous_name_without_write(self, repository: AOIRepository, triangle) -> None:
        aoi = repository.create(triangle)
        persistence = MagicMock()
        repository._persistence = persistence
        result = repository.rename(aoi.id, "   ")
        assert result.name == "AOI 1"
        persistence.save.assert_not_called()

    def test_unknown_id(self, repository: AOIRepository) -> None:
        with pytest.raises(AOINotFoundError) as exc_info:
            repository.rename("missing", "x")
        assert exc_info.value.aoi_id == "missing"
        assert exc_info.value.code == "AOI_NOT_FOUND"


class TestUpdateBoundary:
    """Boundary edits."""

    def test_replaces_bounds_only(self, repository: AOIRepository, rectangle, triangle) -> None:
        aoi = repository.create(rectangle)
        updated = repository.update_boundary(aoi.id, triangle)
        assert updated.lat_lon_vertices == triangle
        assert updated.mgrs_coordinate == aoi.mgrs_coordinate
        assert updated.dimensions == aoi.dimensions
        assert updated.date_created == aoi.date_created

    def test_persists(self, repository: AOIRepository, memory_store: MemoryStore, rectangle, triangle) -> None:
        aoi = repository.create(rectangle)
        repository.update_boundary(aoi.id, triangle)
        assert len(_stored_records(memory_store)[0]["bounds"]) == 3

    def test_invalid_boundary_is_atomic(self, repository: AOIRepository, rectangle) -> None:
        aoi = repository.create(rectangle)
        with pytest.raises(AOIGeometryError):
            repository.update_boundary(aoi.id, [(0.0, 0.0), (0.0, 0.0)])
        assert repository.get(aoi.id) == aoi

    def test_unknown_id(self, repository: AOIRepository, triangle) -> None:
        with pytest.raises(AOINotFoundError):
            repository.update_boundary("missing", triangle)


class TestMove:
    """Reordering."""

    def test_move_to_front(self, repository: AOIRepository, triangle) -> None:
        a, b, c = (repository.create(triangle) for _ in range(3))
        repository.move(c.id, 0)
        assert [x.id for x in repository] == [c.id, a.id, b.id]

    def test_index_is_clamped(self, repository: AOIRepository, triangle) -> None:
        a, b = repository.create(triangle), repository.create(triangle)
        repository.move(a.id, 99)
        assert [x.id for x in repository] == [b.id, a.id]

    def test_persists_order(self, repository: AOIRepository, memory_store: MemoryStore, triangle) -> None:
        a, b = repository.create(triangle), repository.create(triangle)
        repository.move(b.id, 0)
        assert [r["id"] for r in _stored_records(memory_store)] == [b.id, a.id]


class TestDelete:
    """Single and bulk deletion."""

    def test_delete(self, repository: AOIRepository, memory_store: MemoryStore, triangle) -> None:
        a, b = repository.create(triangle), repository.create(triangle)
        removed = repository.delete(a.id)
        assert removed == a
        assert a.id not in repository
        assert repository.find(a.id) is None
        assert [r["id"] for r in _stored_records(memory_store)] == [b.id]

    def test_delete_unknown(self, repository: AOIRepository) -> None:
        with pytest.raises(AOINotFoundError):
            repository.delete("missing")

    def test_delete_releases_render_handle(self, repository: AOIRepository, triangle) -> None:
        aoi = repository.create(triangle)
        handle = MagicMock()
        repository.layers.bind(aoi.id, handle)
        repository.delete(aoi.id)
        handle.remove.assert_called_once_with()
        assert repository.layers.get(aoi.id) is None

    def test_delete_notifies_listeners(self, repository: AOIRepository, triangle) -> None:
        listener = MagicMock()
        repository.add_removal_listener(listener)
        aoi = repository.create(triangle)
        repository.delete(aoi.id)
        listener.assert_called_once_with(frozenset({aoi.id}))

    def test_delete_all_then_load_is_empty(
        self, repository: AOIRepository, adapter: PersistenceAdapter, triangle
    ) -> None:
        handles = [MagicMock() for _ in range(3)]
        for handle in handles:
            repository.layers.bind(repository.create(triangle).id, handle)
        assert repository.delete_all() == 3
        assert len(repository) == 0
        assert adapter.load() == []
        for handle in handles:
            handle.remove.assert_called_once_with()

    def test_delete_all_notifies(self, repository: AOIRepository, triangle) -> None:
        listener = MagicMock()
        repository.add_removal_listener(listener)
        ids = {repository.create(triangle).id for _ in range(2)}
        repository.delete_all()
        listener.assert_called_once_with(frozenset(ids))


class TestAppendAndHydrate:
    """Import and reload paths."""

    def test_append_keeps_ids(self, repository: AOIRepository) -> None:
        imported = [AOI(id="ext-1", name="Imported AOI", bounds=[(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)])]
        added = repository.append(imported)
        assert [a.id for a in added] == ["ext-1"]
        assert "ext-1" in repository

    def test_append_rekeys_collisions(self, repository: AOIRepository, triangle) -> None:
        existing = repository.create(triangle)
        batch = [
            AOI(id=existing.id, name="dup of existing"),
            AOI(id="x", name="first x"),
            AOI(id="x", name="second x"),
        ]
        added = repository.append(batch)
        ids = [a.id for a in repository]
        assert len(set(ids)) == 4
        assert added[0].id != existing.id
        assert added[1].id == "x"
        assert added[2].id not in {existing.id, "x"}

    def test_append_persists(self, repository: AOIRepository, memory_store: MemoryStore) -> None:
        repository.append([AOI(id="ext-1", name="Imported AOI")])
        assert [r["id"] for r in _stored_records(memory_store)] == ["ext-1"]

    def test_append_nothing(self, repository: AOIRepository) -> None:
        assert repository.append([]) == []

    def test_hydrate_replaces_without_writing(self, repository: AOIRepository) -> None:
        persistence = MagicMock()
        repository._persistence = persistence
        repository.hydrate([AOI(id="a", name="A"), AOI(id="b", name="B")])
        assert [a.id for a in repository] == ["a", "b"]
        persistence.save.assert_not_called()

    def test_hydrate_releases_stale_handles(self, repository: AOIRepository) -> None:
        repository.hydrate([AOI(id="a", name="A"), AOI(id="b", name="B")])
        stale, kept = MagicMock(), MagicMock()
        repository.layers.bind("a", stale)
        repository.layers.bind("b", kept)
        listener = MagicMock()
        repository.add_removal_listener(listener)
        repository.hydrate([AOI(id="b", name="B")])
        stale.remove.assert_called_once_with()
        kept.remove.assert_not_called()
        listener.assert_called_once_with(frozenset({"a"}))


class TestReadAccess:
    """Lookup helpers."""

    def test_get_and_find(self, repository: AOIRepository, triangle) -> None:
        aoi = repository.create(triangle)
        assert repository.get(aoi.id) is aoi
        assert repository.find("missing") is None
        with pytest.raises(AOINotFoundError):
            repository.get("missing")

    def test_aois_is_snapshot(self, repository: AOIRepository, triangle) -> None:
        repository.create(triangle)
        snapshot = repository.aois
        repository.create(triangle)
        assert len(snapshot) == 1
        assert isinstance(snapshot, tuple)

    def test_extent(self, repository: AOIRepository, rectangle) -> None:
        assert repository.extent() is None
        repository.create(rectangle)
        assert repository.extent() == (-100.0, 45.0, -99.0, 46.0)

    def test_extent_of_one_aoi(self, repository: AOIRepository, triangle, rectangle) -> None:
        rect = repository.create(rectangle)
        repository.create(triangle)
        assert repository.extent(rect.id) == (-100.0, 45.0, -99.0, 46.0)
        assert repository.extent() != repository.extent(rect.id)
        with pytest.raises(AOINotFoundError):
            repository.extent("missing")

    def test_precision_setting(self, adapter: PersistenceAdapter, rectangle) -> None:
        counter = itertools.count()
        repo = AOIRepository(adapter, mgrs_precision=2, id_factory=lambda: str(next(counter)))
        assert repo.create(rectangle).mgrs_coordinate == to_mgrs(45.5, -99.5, 2)
