"""ContentStore: entity-level operations over pages and categories.

Every mutating call is one read-modify-write against the backend:

    store = ContentStore(JsonFileBackend(path))
    store.upsert_page(Page.new("Install", category="guides"))
    store.move_page(page_id, 0)

The store never mints ids or timestamps on upsert; callers (the CLI, the
importer, ``Page.new``) do that so the store stays deterministic under test.
Category references on pages are slugs and are never enforced or cascaded.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from docstore.models import UNCATEGORIZED, AppState, Category, Page

if TYPE_CHECKING:
    from collections.abc import Sequence

    from docstore.backend import LoadResult, StorageBackend


def _check_unique_ids(items: Sequence[Page] | Sequence[Category], what: str) -> None:
    seen: set[str] = set()
    for item in items:
        if item.id in seen:
            msg = f"Duplicate {what} id in reorder list: {item.id}"
            raise ValueError(msg)
        seen.add(item.id)


class ContentStore:
    """CRUD + ordering over an injected StorageBackend."""

    def __init__(self, backend: StorageBackend) -> None:
        self.backend = backend

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_all(self) -> AppState:
        return self.backend.load()

    def load_result(self) -> LoadResult:
        """Snapshot plus the backend's corrupt-slot flag."""
        return self.backend.load_result()

    def get_page(self, page_id: str) -> Page | None:
        return next((p for p in self.get_all().pages if p.id == page_id), None)

    def get_category(self, category_id: str) -> Category | None:
        return next((c for c in self.get_all().categories if c.id == category_id), None)

    def find_page_by_slug(self, slug: str) -> Page | None:
        return next((p for p in self.get_all().pages if p.slug == slug), None)

    def find_category_by_slug(self, slug: str) -> Category | None:
        return next((c for c in self.get_all().categories if c.slug == slug), None)

    def sorted_categories(self) -> list[Category]:
        return sorted(self.get_all().categories, key=lambda c: c.order)

    def page_count(self, category_slug: str) -> int:
        return sum(1 for p in self.get_all().pages if p.category == category_slug)

    def group_pages(self) -> list[tuple[Category, list[Page]]]:
        """Pages bucketed under their categories in display order.

        Pages whose category slug matches no category go into a trailing
        "Uncategorized" bucket, which is omitted when empty.
        """
        state = self.get_all()
        categories = sorted(state.categories, key=lambda c: c.order)
        known = {c.slug for c in categories}
        sections = [
            (c, sorted((p for p in state.pages if p.category == c.slug), key=lambda p: p.order))
            for c in categories
        ]
        orphans = sorted((p for p in state.pages if p.category not in known), key=lambda p: p.order)
        if orphans:
            sections.append((UNCATEGORIZED, orphans))
        return sections

    # ------------------------------------------------------------------
    # Write — upsert / delete
    # ------------------------------------------------------------------

    def upsert_page(self, page: Page) -> None:
        """Replace the page with the same id in place, or append it."""
        state = self.get_all()
        for i, existing in enumerate(state.pages):
            if existing.id == page.id:
                state.pages[i] = page
                break
        else:
            state.pages.append(page)
        self.backend.store(state)

    def upsert_category(self, category: Category) -> None:
        state = self.get_all()
        for i, existing in enumerate(state.categories):
            if existing.id == category.id:
                state.categories[i] = category
                break
        else:
            state.categories.append(category)
        self.backend.store(state)

    def delete_page(self, page_id: str) -> None:
        state = self.get_all()
        state.pages = [p for p in state.pages if p.id != page_id]
        self.backend.store(state)

    def delete_category(self, category_id: str) -> None:
        """Remove the category. Its pages keep their (now dangling) slug."""
        state = self.get_all()
        state.categories = [c for c in state.categories if c.id != category_id]
        self.backend.store(state)

    # ------------------------------------------------------------------
    # Write — ordering (full-collection replace)
    # ------------------------------------------------------------------

    def reorder_pages(self, pages: Sequence[Page]) -> None:
        """Replace the whole page collection. Omitted pages are dropped."""
        _check_unique_ids(pages, "page")
        state = self.get_all()
        state.pages = list(pages)
        self.backend.store(state)

    def reorder_categories(self, categories: Sequence[Category]) -> None:
        """Replace the whole category collection. Omitted categories are dropped."""
        _check_unique_ids(categories, "category")
        state = self.get_all()
        state.categories = list(categories)
        self.backend.store(state)

    def move_page(self, page_id: str, new_index: int) -> list[Page]:
        """Move a page within its own category and renumber that category densely.

        Pages in other categories keep their order values. Returns the
        category's pages in their new sequence.
        """
        pages = self.get_all().pages
        page = next((p for p in pages if p.id == page_id), None)
        if page is None:
            msg = f"Page not found: {page_id}"
            raise KeyError(msg)

        siblings = sorted((p for p in pages if p.category == page.category), key=lambda p: p.order)
        siblings.remove(page)
        siblings.insert(max(0, min(new_index, len(siblings))), page)
        for i, p in enumerate(siblings):
            p.order = i

        others = [p for p in pages if p.category != page.category]
        self.reorder_pages(others + siblings)
        return siblings

    def move_category(self, category_id: str, new_index: int) -> list[Category]:
        """Move a category and renumber all categories 0..n-1."""
        categories = sorted(self.get_all().categories, key=lambda c: c.order)
        category = next((c for c in categories if c.id == category_id), None)
        if category is None:
            msg = f"Category not found: {category_id}"
            raise KeyError(msg)

        categories.remove(category)
        categories.insert(max(0, min(new_index, len(categories))), category)
        for i, c in enumerate(categories):
            c.order = i
        self.reorder_categories(categories)
        return categories
