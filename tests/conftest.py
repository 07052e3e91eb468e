"""Shared fixtures for docstore tests."""

from __future__ import annotations

import pytest

from docstore.backend import MemoryBackend
from docstore.models import AppState, Category, Page
from docstore.store import ContentStore


def make_page(pid: str, category: str = "guides", order: int = 0, **fields) -> Page:
    fields.setdefault("title", f"Page {pid}")
    fields.setdefault("slug", f"page-{pid}")
    fields.setdefault("content", f"<p>{pid}</p>")
    return Page(
        id=pid,
        category=category,
        order=order,
        created_at="2026-01-01T00:00:00+00:00",
        updated_at="2026-01-01T00:00:00+00:00",
        **fields,
    )


def make_category(cid: str, order: int = 0, slug: str | None = None) -> Category:
    return Category(
        id=cid,
        name=f"Category {cid}",
        slug=slug or cid,
        order=order,
        created_at="2026-01-01T00:00:00+00:00",
    )


@pytest.fixture
def backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def store(backend: MemoryBackend) -> ContentStore:
    return ContentStore(backend)


@pytest.fixture
def seeded_store(store: ContentStore) -> ContentStore:
    """Two categories, three pages (two in guides, one dangling)."""
    state = AppState(
        pages=[
            make_page("p1", "guides", 0),
            make_page("p2", "guides", 1),
            make_page("p3", "gone", 0),
        ],
        categories=[
            make_category("guides", 0),
            make_category("reference", 1),
        ],
    )
    store.backend.store(state)
    return store


@pytest.fixture(autouse=True)
def _no_data_file_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DOCSTORE_DATA_FILE", raising=False)
