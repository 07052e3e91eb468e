"""Data models for the documentation content store."""

from __future__ import annotations

import re
import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

_SLUG_STRIP_RE = re.compile(r"[^a-z0-9]+")


def new_id(taken: Iterable[str] = ()) -> str:
    """Generate a random identifier that is not in ``taken``."""
    taken_set = set(taken)
    while True:
        candidate = uuid.uuid4().hex[:16]
        if candidate not in taken_set:
            return candidate


def now_iso() -> str:
    return datetime.now(UTC).isoformat()


def slugify(text: str) -> str:
    """Lowercase, collapse non-alphanumeric runs to '-', strip edge dashes.

    >>> slugify("Getting Started!")
    'getting-started'
    """
    return _SLUG_STRIP_RE.sub("-", text.lower()).strip("-")


def _unique_tags(tags: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for t in tags:
        if t not in seen:
            seen.add(t)
            out.append(t)
    return out


@dataclass
class Page:
    """A documentation page. ``category`` holds a Category slug (soft reference)."""

    id: str
    title: str
    slug: str
    content: str = ""
    description: str = ""
    category: str = ""
    tags: list[str] = field(default_factory=list)
    icon: str | None = None
    icon_color: str | None = None
    order: int = 0
    created_at: str = ""
    updated_at: str = ""

    def __post_init__(self) -> None:
        self.tags = _unique_tags(self.tags)

    @classmethod
    def new(
        cls,
        title: str,
        *,
        slug: str | None = None,
        taken_ids: Iterable[str] = (),
        **fields: Any,
    ) -> Page:
        """Build a fresh page with a minted id and current timestamps."""
        ts = now_iso()
        return cls(
            id=new_id(taken_ids),
            title=title,
            slug=slug or slugify(title),
            created_at=ts,
            updated_at=ts,
            **fields,
        )

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Page:
        return cls(
            id=str(d["id"]),
            title=d.get("title", ""),
            slug=d.get("slug", ""),
            content=d.get("content", ""),
            description=d.get("description", ""),
            category=d.get("category", ""),
            tags=list(d.get("tags") or []),
            icon=d.get("icon"),
            icon_color=d.get("iconColor"),
            order=int(d.get("order") or 0),
            created_at=d.get("createdAt", ""),
            updated_at=d.get("updatedAt", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "description": self.description,
            "category": self.category,
            "tags": list(self.tags),
            "content": self.content,
        }
        if self.icon:
            d["icon"] = self.icon
        if self.icon_color:
            d["iconColor"] = self.icon_color
        d["order"] = self.order
        d["createdAt"] = self.created_at
        d["updatedAt"] = self.updated_at
        return d


@dataclass
class Category:
    """A page category; pages point at it by slug."""

    id: str
    name: str
    slug: str
    description: str = ""
    icon: str | None = None
    icon_color: str | None = None
    order: int = 0
    created_at: str = ""

    @classmethod
    def new(
        cls,
        name: str,
        *,
        slug: str | None = None,
        taken_ids: Iterable[str] = (),
        **fields: Any,
    ) -> Category:
        return cls(
            id=new_id(taken_ids),
            name=name,
            slug=slug or slugify(name),
            created_at=now_iso(),
            **fields,
        )

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Category:
        return cls(
            id=str(d["id"]),
            name=d.get("name", ""),
            slug=d.get("slug", ""),
            description=d.get("description", ""),
            icon=d.get("icon"),
            icon_color=d.get("iconColor"),
            order=int(d.get("order") or 0),
            created_at=d.get("createdAt", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "description": self.description,
        }
        if self.icon:
            d["icon"] = self.icon
        if self.icon_color:
            d["iconColor"] = self.icon_color
        d["order"] = self.order
        d["createdAt"] = self.created_at
        return d


# Display-only bucket for pages whose category slug matches nothing.
UNCATEGORIZED = Category(
    id="uncategorized",
    name="Uncategorized",
    slug="uncategorized",
    description="Pages without a category",
    order=999,
)


@dataclass
class AppState:
    """The whole persisted document: pages + categories."""

    pages: list[Page] = field(default_factory=list)
    categories: list[Category] = field(default_factory=list)

    @classmethod
    def empty(cls) -> AppState:
        return cls()

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> AppState:
        return cls(
            pages=[Page.from_dict(p) for p in d.get("pages") or []],
            categories=[Category.from_dict(c) for c in d.get("categories") or []],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "pages": [p.to_dict() for p in self.pages],
            "categories": [c.to_dict() for c in self.categories],
        }
