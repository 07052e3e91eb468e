"""Documentation content store: pages + categories in a single JSON slot.

Layout:
    .docstore/
        atom-docs-data.json   # {"pages": [...], "categories": [...]}

Pages reference categories by slug (soft reference, never enforced).
Ordering is an explicit integer per entity: global for categories,
per-category for pages.

Writes are whole-document replacements (temp file + rename), so the last
writer wins. Imports append with fresh ids and never overwrite.
"""

from docstore.backend import JsonFileBackend, LoadResult, MemoryBackend, StorageBackend
from docstore.config import DocStoreConfig, init_config, load_config
from docstore.errors import (
    DocStoreError,
    FormatError,
    ParseError,
    StorageWriteError,
    ValidationError,
)
from docstore.importer import ImportCandidate, ImportResult, apply_import, decode_import
from docstore.models import AppState, Category, Page
from docstore.search import search_pages
from docstore.store import ContentStore

__all__ = [
    "AppState",
    "Category",
    "ContentStore",
    "DocStoreConfig",
    "DocStoreError",
    "FormatError",
    "ImportCandidate",
    "ImportResult",
    "JsonFileBackend",
    "LoadResult",
    "MemoryBackend",
    "Page",
    "ParseError",
    "StorageBackend",
    "StorageWriteError",
    "ValidationError",
    "apply_import",
    "decode_import",
    "init_config",
    "load_config",
    "search_pages",
]
