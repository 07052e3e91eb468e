"""Persistence backends: one durable slot holding the whole AppState as JSON.

    backend = JsonFileBackend(".docstore/atom-docs-data.json")
    state = backend.load()          # never raises; empty state on any problem
    backend.store(state)            # raises StorageWriteError on failure

Reads degrade to the empty state when the slot is missing, unreadable or
malformed. ``load_result()`` additionally reports whether the slot existed but
could not be decoded, so callers can warn without changing the default.
"""

from __future__ import annotations

import contextlib
import fcntl
import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from docstore.errors import StorageWriteError
from docstore.models import AppState

logger = logging.getLogger("docstore.backend")


@dataclass
class LoadResult:
    state: AppState
    was_corrupt: bool = False


class StorageBackend(Protocol):
    """Port the ContentStore persists through."""

    def load_result(self) -> LoadResult: ...

    def load(self) -> AppState: ...

    def store(self, state: AppState) -> None: ...


def _decode(raw: str, source: str) -> LoadResult:
    try:
        obj: Any = json.loads(raw)
        if not isinstance(obj, dict):
            msg = f"top-level value is {type(obj).__name__}, expected object"
            raise TypeError(msg)
        return LoadResult(AppState.from_dict(obj))
    except (ValueError, TypeError, KeyError, AttributeError) as exc:
        logger.warning("corrupt data in %s, using empty state: %s", source, exc)
        return LoadResult(AppState.empty(), was_corrupt=True)


def _encode(state: AppState) -> str:
    try:
        return json.dumps(state.to_dict())
    except (TypeError, ValueError) as exc:
        logger.error("failed to serialize state: %s", exc)
        raise StorageWriteError(f"Could not serialize state: {exc}") from exc


class JsonFileBackend:
    """A single JSON file on disk is the durable slot."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load_result(self) -> LoadResult:
        if not self.path.exists():
            return LoadResult(AppState.empty())
        try:
            with self.path.open(encoding="utf-8") as f:
                fcntl.flock(f, fcntl.LOCK_SH)
                raw = f.read()
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("could not read %s, using empty state: %s", self.path, exc)
            return LoadResult(AppState.empty(), was_corrupt=True)
        if not raw.strip():
            return LoadResult(AppState.empty())
        return _decode(raw, str(self.path))

    def load(self) -> AppState:
        return self.load_result().state

    def store(self, state: AppState) -> None:
        """Replace the slot with ``state``: write a temp file, then rename over."""
        payload = _encode(state)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp.open("w", encoding="utf-8") as f:
                fcntl.flock(f, fcntl.LOCK_EX)
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            tmp.replace(self.path)
        except OSError as exc:
            logger.error("write to %s failed: %s", self.path, exc)
            with contextlib.suppress(OSError):
                tmp.unlink()
            raise StorageWriteError(f"Failed to write {self.path}: {exc}") from exc
        logger.debug("stored %d pages, %d categories to %s",
                     len(state.pages), len(state.categories), self.path)


class MemoryBackend:
    """In-process slot holding the serialized document; used by tests and previews.

    ``fail_writes`` makes ``store`` raise, to exercise the error path.
    """

    def __init__(self, raw: str | None = None) -> None:
        self.raw = raw
        self.fail_writes = False
        self.writes = 0

    def load_result(self) -> LoadResult:
        if self.raw is None or not self.raw.strip():
            return LoadResult(AppState.empty())
        return _decode(self.raw, "memory")

    def load(self) -> AppState:
        return self.load_result().state

    def store(self, state: AppState) -> None:
        if self.fail_writes:
            logger.error("write to memory slot rejected")
            raise StorageWriteError("Memory slot rejected the write")
        self.raw = _encode(state)
        self.writes += 1
