"""Tests for the persistence backends."""

import json
import logging

import pytest

from docstore.backend import JsonFileBackend, MemoryBackend
from docstore.errors import StorageWriteError
from docstore.models import AppState

from conftest import make_category, make_page


def _state() -> AppState:
    return AppState(pages=[make_page("p1")], categories=[make_category("guides")])


class TestJsonFileBackendLoad:
    """Reads never raise and fall back to the empty state."""

    def test_missing_file(self, tmp_path):
        result = JsonFileBackend(tmp_path / "data.json").load_result()
        assert result.state == AppState.empty()
        assert result.was_corrupt is False

    def test_empty_file(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text("")
        assert JsonFileBackend(path).load() == AppState.empty()

    def test_malformed_json(self, tmp_path, caplog):
        path = tmp_path / "data.json"
        path.write_text("{not json")
        with caplog.at_level(logging.WARNING, logger="docstore.backend"):
            result = JsonFileBackend(path).load_result()
        assert result.state == AppState.empty()
        assert result.was_corrupt is True
        assert "corrupt" in caplog.text

    def test_wrong_top_level_type(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text("[1, 2, 3]")
        result = JsonFileBackend(path).load_result()
        assert result.state == AppState.empty()
        assert result.was_corrupt is True

    def test_invalid_utf8(self, tmp_path, caplog):
        path = tmp_path / "data.json"
        path.write_bytes(b'{"pages": [], "categories": [\xff\xfe]}')
        with caplog.at_level(logging.WARNING, logger="docstore.backend"):
            result = JsonFileBackend(path).load_result()
        assert result.state == AppState.empty()
        assert result.was_corrupt is True
        assert "could not read" in caplog.text

    def test_load_hides_corrupt_flag(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text("garbage")
        assert JsonFileBackend(path).load() == AppState.empty()

    def test_unknown_keys_ignored(self, tmp_path):
        path = tmp_path / "data.json"
        doc = _state().to_dict()
        doc["pages"][0]["extra"] = 1
        doc["version"] = 9
        path.write_text(json.dumps(doc))
        assert JsonFileBackend(path).load().pages[0].id == "p1"


class TestJsonFileBackendStore:
    """Writes replace the whole document or fail loudly."""

    def test_roundtrip(self, tmp_path):
        backend = JsonFileBackend(tmp_path / "nested" / "data.json")
        backend.store(_state())
        assert backend.load() == _state()

    def test_on_disk_shape(self, tmp_path):
        path = tmp_path / "data.json"
        JsonFileBackend(path).store(_state())
        doc = json.loads(path.read_text())
        assert set(doc) == {"pages", "categories"}
        assert doc["pages"][0]["createdAt"] == "2026-01-01T00:00:00+00:00"

    def test_no_temp_file_left(self, tmp_path):
        path = tmp_path / "data.json"
        JsonFileBackend(path).store(_state())
        assert [p.name for p in tmp_path.iterdir()] == ["data.json"]

    def test_last_writer_wins(self, tmp_path):
        backend = JsonFileBackend(tmp_path / "data.json")
        backend.store(_state())
        backend.store(AppState.empty())
        assert backend.load() == AppState.empty()

    def test_write_failure_raises(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        backend = JsonFileBackend(blocker / "data.json")
        with pytest.raises(StorageWriteError) as exc_info:
            backend.store(_state())
        assert isinstance(exc_info.value, OSError)
        assert exc_info.value.__cause__ is not None
        assert blocker.read_text() == "not a directory"


class TestMemoryBackend:
    """In-memory slot used by store tests."""

    def test_starts_empty(self):
        assert MemoryBackend().load() == AppState.empty()

    def test_corrupt_raw(self):
        result = MemoryBackend("{{{").load_result()
        assert result.was_corrupt is True

    def test_store_counts_writes(self):
        backend = MemoryBackend()
        backend.store(_state())
        assert backend.writes == 1
        assert backend.load() == _state()

    def test_fail_writes(self):
        backend = MemoryBackend()
        backend.store(_state())
        backend.fail_writes = True
        with pytest.raises(StorageWriteError):
            backend.store(AppState.empty())
        assert backend.load() == _state()
