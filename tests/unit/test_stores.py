"""Tests for the key-value store backends and the store factory."""

from __future__ import annotations

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from mgrs_mapper.core.config import MapperConfig
from mgrs_mapper.storage import (
    JsonFileStore,
    KeyValueStore,
    MemoryStore,
    StorageError,
    StorageUnavailableError,
    StorageWriteError,
    get_store,
    list_stores,
    register_store,
)
from mgrs_mapper.storage import factory


class TestMemoryStore:
    """Dict-backed store."""

    def test_get_set_remove(self) -> None:
        store = MemoryStore()
        assert store.get_item("k") is None
        store.set_item("k", "v")
        assert store.get_item("k") == "v"
        store.remove_item("k")
        assert store.get_item("k") is None

    def test_remove_missing_is_noop(self) -> None:
        MemoryStore().remove_item("missing")

    def test_initial_items_are_copied(self) -> None:
        initial = {"k": "v"}
        store = MemoryStore(initial)
        store.set_item("k", "changed")
        assert initial["k"] == "v"

    def test_available_and_repr(self) -> None:
        store = MemoryStore()
        assert store.available is True
        assert repr(store) == "MemoryStore(name='memory')"


class TestJsonFileStore:
    """Single-file JSON store."""

    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        store = JsonFileStore(str(tmp_path / "storage.json"))
        assert store.get_item("k") is None

    def test_available_does_not_create_directories(self, tmp_path: Path) -> None:
        parent = tmp_path / "a" / "b"
        store = JsonFileStore(str(parent / "storage.json"))
        assert store.available is True
        assert not (tmp_path / "a").exists()

    def test_unavailable_under_regular_file(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("x", encoding="utf-8")
        store = JsonFileStore(str(blocker / "sub" / "storage.json"))
        assert store.available is False

    def test_round_trip_and_file_layout(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "storage.json"
        store = JsonFileStore(str(path))
        store.set_item("mgrs-map-project-name", "Recon North")
        store.set_item("mgrs-map-aois", "[]")
        assert json.loads(path.read_text(encoding="utf-8")) == {
            "mgrs-map-project-name": "Recon North",
            "mgrs-map-aois": "[]",
        }
        assert JsonFileStore(str(path)).get_item("mgrs-map-project-name") == "Recon North"

    def test_remove(self, tmp_path: Path) -> None:
        store = JsonFileStore(str(tmp_path / "storage.json"))
        store.set_item("a", "1")
        store.set_item("b", "2")
        store.remove_item("a")
        assert store.get_item("a") is None
        assert store.get_item("b") == "2"

    def test_no_temporary_files_left(self, tmp_path: Path) -> None:
        store = JsonFileStore(str(tmp_path / "storage.json"))
        store.set_item("a", "1")
        assert os.listdir(tmp_path) == ["storage.json"]

    def test_corrupt_file_raises_on_read(self, tmp_path: Path) -> None:
        path = tmp_path / "storage.json"
        path.write_text("{broken", encoding="utf-8")
        with pytest.raises(StorageError, match="not valid JSON"):
            JsonFileStore(str(path)).get_item("k")

    def test_non_object_file_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "storage.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(StorageError, match="JSON object"):
            JsonFileStore(str(path)).get_item("k")

    def test_corrupt_file_replaced_on_write(self, tmp_path: Path) -> None:
        path = tmp_path / "storage.json"
        path.write_text("{broken", encoding="utf-8")
        store = JsonFileStore(str(path))
        store.set_item("k", "v")
        assert store.get_item("k") == "v"

    def test_non_string_value_rejected(self, tmp_path: Path) -> None:
        store = JsonFileStore(str(tmp_path / "storage.json"))
        with pytest.raises(StorageWriteError):
            store.set_item("k", 42)  # type: ignore[arg-type]

    def test_write_failure_raises_storage_write_error(self, tmp_path: Path) -> None:
        store = JsonFileStore(str(tmp_path / "storage.json"))
        with patch("mgrs_mapper.storage.json_file.os.replace", side_effect=OSError("denied")):
            with pytest.raises(StorageWriteError) as exc_info:
                store.set_item("k", "v")
        assert exc_info.value.retryable is True
        assert exc_info.value.store == "json_file"
        assert os.listdir(tmp_path) == []


class TestStoreFactory:
    """Backend registry."""

    def test_builtin_backends(self) -> None:
        assert {"json_file", "memory"} <= set(list_stores())

    def test_memory(self) -> None:
        assert isinstance(get_store("memory", MapperConfig()), MemoryStore)

    def test_json_file_uses_store_path(self, tmp_path: Path) -> None:
        path = str(tmp_path / "storage.json")
        store = get_store("json_file", MapperConfig(store_path=path))
        assert isinstance(store, JsonFileStore)
        assert store.path == path

    def test_none_yields_no_store(self) -> None:
        assert get_store("none", MapperConfig()) is None

    def test_unknown_backend(self) -> None:
        with pytest.raises(StorageUnavailableError, match="Unknown store backend"):
            get_store("s3", MapperConfig())

    def test_register_custom_backend(self) -> None:
        class _Custom(MemoryStore):
            name = "custom"

        with patch.dict(factory._STORE_REGISTRY, clear=False):
            register_store("custom", lambda config: _Custom())
            store = get_store("custom", MapperConfig())
            assert isinstance(store, KeyValueStore)
            assert store.name == "custom"

    @pytest.mark.parametrize("name", ["", "none"])
    def test_register_rejects_reserved_names(self, name: str) -> None:
        with pytest.raises(ValueError):
            register_store(name, lambda config: MemoryStore())
