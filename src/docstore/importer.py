"""Two-phase import of pages/categories from an exported JSON document.

Phase 1 (``decode_import``) parses and validates eagerly and returns an
ImportCandidate that can be previewed. Phase 2 (``apply_import``) appends the
candidate's entities to the live store in a single write. Existing entities
are never replaced: every incoming entity gets a fresh id and timestamps, and
is renumbered after the current maximum order (categories globally, pages per
category slug).
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeVar

from docstore.errors import FormatError, ParseError, ValidationError
from docstore.models import AppState, Category, Page, new_id, now_iso

if TYPE_CHECKING:
    from collections.abc import Callable

    from docstore.store import ContentStore

logger = logging.getLogger("docstore.importer")

_PAGE_REQUIRED = ("id", "title", "slug", "content")
_CATEGORY_REQUIRED = ("id", "name", "slug")

T = TypeVar("T")


@dataclass
class ImportCandidate:
    """A decoded, validated document waiting for confirmation."""

    kind: str                      # all | pages | categories
    state: AppState

    @property
    def page_count(self) -> int:
        return len(self.state.pages)

    @property
    def category_count(self) -> int:
        return len(self.state.categories)

    def summary(self) -> str:
        if self.kind == "pages":
            return f"{self.page_count} pages"
        if self.kind == "categories":
            return f"{self.category_count} categories"
        return f"{self.page_count} pages and {self.category_count} categories"


@dataclass
class ImportResult:
    pages: list[Page] = field(default_factory=list)
    categories: list[Category] = field(default_factory=list)


def _decode_entities(
    items: list[Any],
    kind: str,
    required: tuple[str, ...],
    factory: Callable[[dict[str, Any]], T],
) -> list[T]:
    """Check and build entities in order, stopping at the first bad index."""
    out: list[T] = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise ValidationError(kind, index, "object")
        for name in required:
            value = item.get(name)
            if not isinstance(value, str) or not value:
                raise ValidationError(kind, index, name)
        try:
            out.append(factory(item))
        except (TypeError, ValueError) as exc:
            raise ValidationError(kind, index, "well-typed fields") from exc
    return out


def decode_import(text: str | bytes) -> ImportCandidate:
    """Parse + validate an import document.

    Raises ParseError (not UTF-8 or not JSON), FormatError (no pages/categories
    list) or ValidationError (first entity with a missing or mistyped field).
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(f"Failed to read file as UTF-8: {exc}") from exc
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise ParseError(f"Failed to parse JSON file: {exc}") from exc

    if not isinstance(data, dict):
        raise FormatError("Invalid data format - must contain pages and/or categories")
    has_pages = data.get("pages") is not None
    has_categories = data.get("categories") is not None
    if not has_pages and not has_categories:
        raise FormatError("Invalid data format - must contain pages and/or categories")

    raw_pages = data.get("pages") if has_pages else []
    raw_categories = data.get("categories") if has_categories else []
    if not isinstance(raw_pages, list) or not isinstance(raw_categories, list):
        raise FormatError("Invalid data format - pages and categories must be lists")

    if has_pages and has_categories:
        kind = "all"
    elif has_pages:
        kind = "pages"
    else:
        kind = "categories"

    state = AppState(
        pages=_decode_entities(raw_pages, "page", _PAGE_REQUIRED, Page.from_dict),
        categories=_decode_entities(raw_categories, "category", _CATEGORY_REQUIRED, Category.from_dict),
    )
    return ImportCandidate(kind=kind, state=state)


def apply_import(store: ContentStore, candidate: ImportCandidate) -> ImportResult:
    """Append the candidate's entities to the store as one write."""
    state = store.get_all()
    ts = now_iso()
    result = ImportResult()

    taken = {p.id for p in state.pages} | {c.id for c in state.categories}
    next_page_order: dict[str, int] = {}
    for p in state.pages:
        next_page_order[p.category] = max(next_page_order.get(p.category, 0), p.order + 1)
    for incoming in candidate.state.pages:
        page_id = new_id(taken)
        taken.add(page_id)
        order = next_page_order.get(incoming.category, 0)
        next_page_order[incoming.category] = order + 1
        result.pages.append(Page(
            id=page_id,
            title=incoming.title,
            slug=incoming.slug,
            content=incoming.content,
            description=incoming.description,
            category=incoming.category,
            tags=list(incoming.tags),
            icon=incoming.icon,
            icon_color=incoming.icon_color,
            order=order,
            created_at=ts,
            updated_at=ts,
        ))

    next_order = max((c.order for c in state.categories), default=-1) + 1
    for incoming in candidate.state.categories:
        category_id = new_id(taken)
        taken.add(category_id)
        result.categories.append(Category(
            id=category_id,
            name=incoming.name,
            slug=incoming.slug,
            description=incoming.description,
            icon=incoming.icon,
            icon_color=incoming.icon_color,
            order=next_order,
            created_at=ts,
        ))
        next_order += 1

    state.pages.extend(result.pages)
    state.categories.extend(result.categories)
    store.backend.store(state)
    logger.info("imported %d pages, %d categories", len(result.pages), len(result.categories))
    return result
