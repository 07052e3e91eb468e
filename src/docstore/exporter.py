"""Backup encoders: pretty-printed JSON in the same shape the importer accepts."""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from docstore.models import AppState, Category, Page

logger = logging.getLogger("docstore.exporter")

EXPORT_PREFIXES = {
    "all": "docs-backup",
    "pages": "pages-backup",
    "categories": "categories-backup",
}


def encode_all(state: AppState) -> str:
    return json.dumps(state.to_dict(), indent=2)


def encode_pages(pages: Sequence[Page]) -> str:
    return json.dumps({"pages": [p.to_dict() for p in pages]}, indent=2)


def encode_categories(categories: Sequence[Category]) -> str:
    return json.dumps({"categories": [c.to_dict() for c in categories]}, indent=2)


def encode(state: AppState, kind: str) -> str:
    """Encode the slice of ``state`` named by kind (all | pages | categories)."""
    if kind == "all":
        return encode_all(state)
    if kind == "pages":
        return encode_pages(state.pages)
    if kind == "categories":
        return encode_categories(state.categories)
    msg = f"Unknown export kind: {kind}"
    raise ValueError(msg)


def export_filename(kind: str, today: date | None = None) -> str:
    """``docs-backup-2026-10-18.json`` and friends."""
    day = (today or date.today()).isoformat()
    return f"{EXPORT_PREFIXES[kind]}-{day}.json"


def write_export(directory: Path | str, kind: str, text: str, today: date | None = None) -> Path:
    """Write an encoded backup into directory and return its path."""
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / export_filename(kind, today)
    path.write_text(text + "\n", encoding="utf-8")
    logger.info("exported %s to %s", kind, path)
    return path
