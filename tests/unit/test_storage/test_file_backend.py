"""Tests for the JSON file and in-memory storage backends."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from tabshell.storage import JsonFileStorage, MemoryStorage, StorageError, create_storage


class TestJsonFileStorage:
    def test_missing_file_reads_as_empty(self, tmp_path: Path) -> None:
        storage = JsonFileStorage(tmp_path / "state.json")
        assert storage.get("terminal-sessions") is None

    def test_set_then_get(self, tmp_path: Path) -> None:
        storage = JsonFileStorage(tmp_path / "state.json")
        storage.set("active-terminal-tab", "2")
        storage.set("terminal-sessions", "[]")
        assert storage.get("active-terminal-tab") == "2"
        assert json.loads((tmp_path / "state.json").read_text()) == {
            "active-terminal-tab": "2",
            "terminal-sessions": "[]",
        }

    def test_survives_new_instance(self, tmp_path: Path) -> None:
        JsonFileStorage(tmp_path / "state.json").set("k", "v")
        assert JsonFileStorage(tmp_path / "state.json").get("k") == "v"

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "dir" / "state.json"
        JsonFileStorage(path).set("k", "v")
        assert path.exists()

    def test_no_temp_files_left_behind(self, tmp_path: Path) -> None:
        storage = JsonFileStorage(tmp_path / "state.json")
        storage.set("a", "1")
        storage.set("b", "2")
        assert [p.name for p in tmp_path.iterdir()] == ["state.json"]

    def test_delete(self, tmp_path: Path) -> None:
        storage = JsonFileStorage(tmp_path / "state.json")
        storage.set("a", "1")
        storage.delete("a")
        storage.delete("missing")
        assert storage.get("a") is None

    def test_expands_user(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        storage = JsonFileStorage("~/state.json")
        assert storage.path == tmp_path / "state.json"

    def test_corrupt_file_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        path.write_text("{not json")
        with pytest.raises(StorageError, match="Cannot read"):
            JsonFileStorage(path).get("k")

    def test_write_replaces_corrupt_file(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        path = tmp_path / "state.json"
        path.write_text("{truncated")
        storage = JsonFileStorage(path)

        storage.set("active-terminal-tab", "1")

        assert storage.get("active-terminal-tab") == "1"
        assert json.loads(path.read_text()) == {"active-terminal-tab": "1"}
        assert "Discarding unreadable state file" in caplog.text

    def test_non_object_file_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        path.write_text("[1, 2]")
        with pytest.raises(StorageError):
            JsonFileStorage(path).get("k")

    def test_non_string_value_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        path.write_text('{"k": 5}')
        with pytest.raises(StorageError, match="not a string"):
            JsonFileStorage(path).get("k")

    def test_unwritable_location_raises(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        with pytest.raises(StorageError, match="Cannot write"):
            JsonFileStorage(blocker / "state.json").set("k", "v")


class TestMemoryStorage:
    def test_basic_operations(self) -> None:
        storage = MemoryStorage({"a": "1"})
        assert storage.get("a") == "1"
        storage.set("b", "2")
        storage.delete("a")
        assert storage.get("a") is None
        assert storage.get("b") == "2"

    def test_initial_dict_is_copied(self) -> None:
        initial = {"a": "1"}
        MemoryStorage(initial).set("a", "2")
        assert initial == {"a": "1"}


class TestCreateStorage:
    def test_file_backend(self, tmp_path: Path) -> None:
        from tabshell.config.settings import Settings

        settings = Settings(storage={"backend": "file", "path": str(tmp_path / "s.json")})
        storage = create_storage(settings)
        assert isinstance(storage, JsonFileStorage)
        assert storage.path == tmp_path / "s.json"

    def test_memory_backend(self) -> None:
        from tabshell.config.settings import Settings

        assert isinstance(create_storage(Settings(storage={"backend": "memory"})), MemoryStorage)
