#!/usr/bin/env python3
"""
Document persistence, export and import.

The saved document is one JSON blob under a fixed key in a durable key-value
store. Absent or corrupt storage reads as "no saved document". Import is
all-or-nothing: a payload either yields a complete Document or raises.
"""

import json
import logging
import time
from pathlib import Path
from typing import Callable, Protocol

from config import AUTOSAVE_DELAY, STORAGE, STORAGE_KEY
from document_model import Document, DocumentFormatError

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Durable string key-value store."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """In-memory store, lost when the process exits."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JSONFileStore:
    """Store backed by a single JSON object on disk."""

    def __init__(self, path: Path):
        self.path = path

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable store {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed store {self.path}")
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def get(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data), encoding="utf-8")
        tmp_path.replace(self.path)


def load_document(store: KeyValueStore, key: str = STORAGE_KEY) -> Document | None:
    """Load the saved document, or None when nothing usable is stored."""
    raw = store.get(key)
    if not raw:
        return None
    try:
        return Document.from_dict(json.loads(raw))
    except (json.JSONDecodeError, DocumentFormatError) as e:
        logger.warning(f"Discarding corrupt saved document: {e}")
        return None


def save_document(store: KeyValueStore, document: Document, key: str = STORAGE_KEY) -> None:
    store.set(key, json.dumps(document.to_dict()))
    logger.debug(f"Saved document under {key}")


def export_document(document: Document) -> str:
    """Serialize a document for download."""
    return json.dumps(document.to_dict(), indent=2, ensure_ascii=False)


def export_to_file(document: Document, path: Path | None = None) -> Path:
    path = path or Path(STORAGE.EXPORT_FILENAME)
    path.write_text(export_document(document), encoding="utf-8")
    return path


def import_document(text: str) -> Document:
    """
    Parse an exported document.

    Raises:
        DocumentFormatError: payload is not valid JSON or not a document
    """
    try:
        data = json.loads(text)
    except (TypeError, json.JSONDecodeError) as e:
        raise DocumentFormatError(f"Invalid JSON: {e}") from e
    return Document.from_dict(data)


def import_from_file(path: Path) -> Document:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentFormatError(f"Cannot read {path}: {e}") from e
    return import_document(text)


class Debouncer:
    """
    Run a callback once a burst of touches has been quiet for `delay` seconds.

    Driven by the host loop: touch() on every edit, poll() on every tick.
    """

    def __init__(
        self,
        callback: Callable[[], None],
        delay: float = AUTOSAVE_DELAY,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.callback = callback
        self.delay = delay
        self.clock = clock
        self.deadline: float | None = None

    @property
    def pending(self) -> bool:
        return self.deadline is not None

    def touch(self) -> None:
        self.deadline = self.clock() + self.delay

    def cancel(self) -> None:
        self.deadline = None

    def poll(self) -> bool:
        """Fire if the window has elapsed; returns True when it fired."""
        if self.deadline is None or self.clock() < self.deadline:
            return False
        return self.flush()

    def flush(self) -> bool:
        if self.deadline is None:
            return False
        self.deadline = None
        self.callback()
        return True
