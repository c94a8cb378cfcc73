"""Tests for the key-value stores."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from flare.config import Settings
from flare.services.store import JsonFileStore, MemoryStore, create_store


class TestMemoryStore:
    def test_get_missing_is_none(self) -> None:
        assert MemoryStore().get("symptoms") is None

    def test_values_are_copied(self) -> None:
        store = MemoryStore()
        value = {"periods": [{"start": "2024-01-01", "end": None}]}
        store.set("cycle", value)
        value["periods"].clear()
        assert store.get("cycle")["periods"]

        fetched = store.get("cycle")
        fetched["periods"].clear()
        assert store.get("cycle")["periods"]

    def test_clear(self) -> None:
        store = MemoryStore({"symptoms": {"2024-01-01": {"notes": "x"}}})
        store.clear()
        assert store.get("symptoms") is None


class TestJsonFileStore:
    def test_roundtrip_through_disk(self, tmp_path: Path) -> None:
        path = tmp_path / "data.json"
        JsonFileStore(path).set("symptoms", {"2024-01-01": {"notes": "x"}})

        assert json.loads(path.read_text()) == {"symptoms": {"2024-01-01": {"notes": "x"}}}
        assert JsonFileStore(path).get("symptoms") == {"2024-01-01": {"notes": "x"}}

    def test_set_keeps_other_keys(self, tmp_path: Path) -> None:
        store = JsonFileStore(tmp_path / "data.json")
        store.set("symptoms", {})
        store.set("cycle", {"periods": []})
        assert JsonFileStore(tmp_path / "data.json").get("symptoms") == {}

    def test_no_temp_file_left_behind(self, tmp_path: Path) -> None:
        store = JsonFileStore(tmp_path / "data.json")
        store.set("cycle", {"periods": []})
        assert [p.name for p in tmp_path.iterdir()] == ["data.json"]

    def test_failed_write_removes_temp_file(self, tmp_path: Path) -> None:
        store = JsonFileStore(tmp_path / "data.json")
        with pytest.raises(TypeError):
            store.set("cycle", {"periods": {"not", "json"}})
        assert list(tmp_path.iterdir()) == []

    def test_creates_parent_directory(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "dir" / "data.json"
        JsonFileStore(path).set("cycle", {"periods": []})
        assert path.exists()

    def test_missing_file_reads_empty(self, tmp_path: Path) -> None:
        store = JsonFileStore(tmp_path / "absent.json")
        assert store.get("cycle") is None
        assert not (tmp_path / "absent.json").exists()

    def test_clear_removes_file(self, tmp_path: Path) -> None:
        path = tmp_path / "data.json"
        store = JsonFileStore(path)
        store.set("cycle", {"periods": []})
        store.clear()
        assert not path.exists()
        assert store.get("cycle") is None

    def test_corrupt_file_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "data.json"
        path.write_text("{not json")
        with pytest.raises(json.JSONDecodeError):
            JsonFileStore(path).get("cycle")


class TestCreateStore:
    def test_memory_backend(self) -> None:
        assert isinstance(create_store(Settings(storage_backend="memory")), MemoryStore)

    def test_file_backend(self, tmp_path: Path) -> None:
        store = create_store(Settings(storage_backend="file", data_file=tmp_path / "f.json"))
        assert isinstance(store, JsonFileStore)
        assert store.path == tmp_path / "f.json"

    def test_unknown_backend(self) -> None:
        with pytest.raises(ValueError, match="redis"):
            create_store(Settings(storage_backend="redis"))
