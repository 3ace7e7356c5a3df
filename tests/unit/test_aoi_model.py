"""Tests for the AOI, Project and draw-event models."""

from __future__ import annotations

import dataclasses

import pytest

from mgrs_mapper.models import AOI, Created, EditCancelled, Edited, Project


def _aoi(**overrides: object) -> AOI:
    fields: dict[str, object] = {
        "id": "aoi-1",
        "name": "AOI 1",
        "mgrs_coordinate": "14TNR0000000000",
        "dimensions": "8686607499.28 sq m",
        "bounds": [(-100.0, 45.0), (-99.0, 45.0), (-99.0, 46.0), (-100.0, 46.0)],
        "date_created": "2024-06-01T12:30:00.000Z",
    }
    fields.update(overrides)
    return AOI(**fields)  # type: ignore[arg-type]


class TestAOIRecord:
    """Serialisation to the persisted layout."""

    def test_to_dict_uses_camel_case(self) -> None:
        d = _aoi().to_dict()
        assert set(d) == {"id", "name", "mgrsCoordinate", "dimensions", "bounds", "dateCreated"}
        assert d["bounds"] == [[-100.0, 45.0], [-99.0, 45.0], [-99.0, 46.0], [-100.0, 46.0]]

    def test_render_handle_is_not_a_field(self) -> None:
        assert "layer" not in {f.name for f in dataclasses.fields(AOI)}

    def test_round_trip(self) -> None:
        original = _aoi()
        assert AOI.from_dict(original.to_dict()) == original

    def test_from_dict_ignores_legacy_layer_key(self) -> None:
        data = _aoi().to_dict()
        data["layer"] = {"_leaflet_id": 42}
        assert AOI.from_dict(data) == _aoi()

    def test_from_dict_defaults(self) -> None:
        aoi = AOI.from_dict({"id": "x", "bounds": [[1, 2], [3, 4], [5, 6]]})
        assert aoi.name == ""
        assert aoi.mgrs_coordinate == ""
        assert aoi.bounds == [(1.0, 2.0), (3.0, 4.0), (5.0, 6.0)]

    def test_from_dict_requires_id(self) -> None:
        with pytest.raises(ValueError, match="no id"):
            AOI.from_dict({"name": "orphan"})

    def test_from_dict_rejects_non_dict(self) -> None:
        with pytest.raises(TypeError):
            AOI.from_dict(["not", "a", "record"])  # type: ignore[arg-type]

    def test_from_dict_rejects_malformed_vertex(self) -> None:
        with pytest.raises(ValueError, match="Malformed vertex"):
            AOI.from_dict({"id": "x", "bounds": [[1, 2], [3]]})

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            _aoi().name = "changed"  # type: ignore[misc]


class TestAOICopies:
    """Replacement copies keep the other fields."""

    def test_renamed(self) -> None:
        renamed = _aoi().renamed("North field")
        assert renamed.name == "North field"
        assert renamed.id == "aoi-1"

    def test_with_bounds_keeps_derived_fields(self) -> None:
        original = _aoi()
        moved = original.with_bounds([(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)])
        assert moved.bounds == [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)]
        assert moved.mgrs_coordinate == original.mgrs_coordinate
        assert moved.dimensions == original.dimensions

    def test_with_id(self) -> None:
        assert _aoi().with_id("aoi-9").id == "aoi-9"

    def test_lat_lon_vertices_swaps_order(self) -> None:
        aoi = _aoi()
        assert aoi.lat_lon_vertices[0] == (45.0, -100.0)
        assert aoi.vertex_count == 4


class TestProject:
    """Project name handling."""

    def test_default_name(self) -> None:
        assert Project().name == "Untitled Project"

    def test_rename_trims(self) -> None:
        project = Project()
        assert project.rename("  Recon North  ") is True
        assert project.name == "Recon North"

    def test_rename_to_blank_keeps_name(self) -> None:
        project = Project(name="Recon North")
        assert project.rename("   ") is False
        assert project.name == "Recon North"

    def test_rename_to_same_name(self) -> None:
        project = Project(name="Recon North")
        assert project.rename("Recon North") is False

    def test_aoi_count(self) -> None:
        assert Project(aois=[_aoi(), _aoi(id="aoi-2")]).aoi_count == 2


class TestDrawEvents:
    """Draw-surface completion events."""

    def test_events_are_frozen(self) -> None:
        event = Created(vertices=[(0.0, 0.0)])
        with pytest.raises(dataclasses.FrozenInstanceError):
            event.vertices = []  # type: ignore[misc]

    def test_equality(self) -> None:
        assert Edited("a", [(1.0, 2.0)]) == Edited("a", [(1.0, 2.0)])
        assert EditCancelled("a") != EditCancelled("b")
