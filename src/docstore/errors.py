"""Exception types raised by the store, import and export layers."""

from __future__ import annotations


class DocStoreError(Exception):
    """Base class for all recoverable docstore failures."""


class StorageWriteError(DocStoreError, OSError):
    """The backend rejected a write. The previous document is left in place."""


class ParseError(DocStoreError):
    """Import text is not valid JSON."""


class FormatError(DocStoreError):
    """Import document has neither a ``pages`` nor a ``categories`` list."""


class ValidationError(DocStoreError):
    """An imported entity is missing a required field.

    ``kind`` is ``"page"`` or ``"category"``; ``index`` is its position in the
    incoming list.
    """

    def __init__(self, kind: str, index: int, field: str) -> None:
        self.kind = kind
        self.index = index
        self.field = field
        super().__init__(f"Invalid {kind} structure at index {index}: missing {field}")
