"""Tests for backup encoding."""

import json
from datetime import date

import pytest

from docstore.exporter import encode, encode_all, encode_categories, encode_pages, export_filename, write_export
from docstore.models import AppState

from conftest import make_category, make_page


@pytest.fixture
def state() -> AppState:
    return AppState(pages=[make_page("p1")], categories=[make_category("c1")])


class TestEncode:
    """Document shapes."""

    def test_all(self, state):
        doc = json.loads(encode_all(state))
        assert set(doc) == {"pages", "categories"}

    def test_pages(self, state):
        doc = json.loads(encode_pages(state.pages))
        assert set(doc) == {"pages"}
        assert doc["pages"][0]["id"] == "p1"

    def test_categories(self, state):
        doc = json.loads(encode_categories(state.categories))
        assert set(doc) == {"categories"}

    def test_pretty_printed(self, state):
        assert "\n  " in encode_all(state)

    def test_dispatch(self, state):
        assert encode(state, "pages") == encode_pages(state.pages)
        with pytest.raises(ValueError):
            encode(state, "everything")


class TestFiles:
    """Dated file delivery."""

    @pytest.mark.parametrize(("kind", "name"), [
        ("all", "docs-backup-2026-10-18.json"),
        ("pages", "pages-backup-2026-10-18.json"),
        ("categories", "categories-backup-2026-10-18.json"),
    ])
    def test_filename(self, kind, name):
        assert export_filename(kind, date(2026, 10, 18)) == name

    def test_write_export(self, tmp_path, state):
        path = write_export(tmp_path / "out", "all", encode_all(state), today=date(2026, 1, 2))
        assert path == tmp_path / "out" / "docs-backup-2026-01-02.json"
        assert json.loads(path.read_text()) == state.to_dict()
