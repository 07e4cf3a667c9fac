#!/usr/bin/env python3
"""
Editing session for a resume document.

Every edit is a described mutation applied to the session's own Document,
followed by a full synchronous re-pagination. Saving is debounced; the
preview's scroll offset survives each rebuild.
"""

import logging
import time
from dataclasses import dataclass, fields, is_dataclass
from pathlib import Path
from typing import Any, Callable, Literal, Protocol

from config import PAGE_WIDTH, STORAGE_KEY
from document_model import (
    BULLET_FIELDS,
    OTHERS_DEFAULT_TITLE,
    SECTION_ORDER,
    Document,
    DocumentFormatError,
    empty_document,
    new_item,
    split_skills,
)
from page_renderer import PageRenderer
from pagination import MeasurementOracle, PaginationResult, paginate_document
from persistence import Debouncer, KeyValueStore, export_document, import_document, load_document, save_document
from scaling import PreviewLayout, layout_preview

logger = logging.getLogger(__name__)

INVALID_IMPORT_MESSAGE = "Invalid JSON file."

PrintFormat = Literal["pdf", "png"]


# =============================================================================
# Commands
# =============================================================================


def _step(target: Any, segment: str | int) -> Any:
    if isinstance(target, Document) and segment in SECTION_ORDER:
        return target.section_items(segment)
    if isinstance(target, (list, dict)):
        return target[segment]
    if is_dataclass(target) and segment in {f.name for f in fields(target)}:
        return getattr(target, segment)
    raise KeyError(f"No field {segment!r} on {type(target).__name__}")


@dataclass(frozen=True)
class SetField:
    """Set one value, addressed by a path such as ("experience", 0, "role")."""

    path: tuple[str | int, ...]
    value: Any

    def apply(self, document: Document) -> None:
        if not self.path:
            raise KeyError("Empty field path")
        target: Any = document
        for segment in self.path[:-1]:
            target = _step(target, segment)
        last = self.path[-1]
        if isinstance(target, list):
            current = target[last]
            if not isinstance(self.value, type(current)):
                raise TypeError(f"Cannot replace {type(current).__name__} at {self.path!r} with {self.value!r}")
            target[last] = self.value
        elif isinstance(target, dict):
            target[last] = self.value
        elif is_dataclass(target) and last in {f.name for f in fields(target)}:
            # Only text fields; collections, contact and others have their own commands
            current = getattr(target, last)
            if not isinstance(current, str) or not isinstance(self.value, str):
                raise TypeError(f"Field {last!r} of {type(target).__name__} cannot be set to {self.value!r}")
            setattr(target, last, self.value)
        else:
            raise KeyError(f"No field {last!r} on {type(target).__name__}")


@dataclass(frozen=True)
class SetSkills:
    """Replace skills from comma-separated text."""

    text: str

    def apply(self, document: Document) -> None:
        document.skills = split_skills(self.text)


@dataclass(frozen=True)
class SetOthersTitle:
    title: str

    def apply(self, document: Document) -> None:
        document.others.section_title = self.title or OTHERS_DEFAULT_TITLE


@dataclass(frozen=True)
class AddItem:
    section: str

    def apply(self, document: Document) -> None:
        document.section_items(self.section).append(new_item(self.section))


@dataclass(frozen=True)
class RemoveItem:
    section: str
    index: int

    def apply(self, document: Document) -> None:
        del document.section_items(self.section)[self.index]


@dataclass(frozen=True)
class MoveItem:
    """Move an item; a target outside the list leaves it unchanged."""

    section: str
    index: int
    to: int

    def apply(self, document: Document) -> None:
        items = document.section_items(self.section)
        if self.to < 0 or self.to >= len(items):
            return
        items.insert(self.to, items.pop(self.index))


@dataclass(frozen=True)
class AddBullet:
    section: str
    index: int

    def apply(self, document: Document) -> None:
        item = document.section_items(self.section)[self.index]
        item.setdefault(BULLET_FIELDS[self.section], []).append("")


@dataclass(frozen=True)
class RemoveLastBullet:
    section: str
    index: int

    def apply(self, document: Document) -> None:
        bullets = document.section_items(self.section)[self.index].get(BULLET_FIELDS[self.section])
        if bullets:
            bullets.pop()


class Command(Protocol):
    def apply(self, document: Document) -> None: ...


# =============================================================================
# Preview surface
# =============================================================================


class PreviewSurface(Protocol):
    """Where pages are presented; rebuilding it resets its scroll offset."""

    width: float
    scroll_top: float

    def show(self, result: PaginationResult, layout: PreviewLayout) -> None: ...

    def rescale(self, layout: PreviewLayout) -> None: ...


class PreviewPane:
    """Headless preview surface that keeps the last presentation."""

    def __init__(self, width: float = PAGE_WIDTH):
        self.width = width
        self.scroll_top = 0.0
        self.result: PaginationResult | None = None
        self.layout = PreviewLayout()

    def show(self, result: PaginationResult, layout: PreviewLayout) -> None:
        self.result = result
        self.layout = layout
        self.scroll_top = 0.0

    def rescale(self, layout: PreviewLayout) -> None:
        self.layout = layout


# =============================================================================
# Session
# =============================================================================


class EditorSession:
    """Owns the document and keeps the paginated preview current."""

    def __init__(
        self,
        document: Document,
        store: KeyValueStore,
        oracle: MeasurementOracle,
        surface: PreviewSurface,
        notify: Callable[[str], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
        storage_key: str = STORAGE_KEY,
    ):
        self.document = document
        self.store = store
        self.oracle = oracle
        self.surface = surface
        self.notify = notify or (lambda message: logger.warning(message))
        self.storage_key = storage_key
        self.autosave = Debouncer(self.save_now, clock=clock)
        self.result: PaginationResult | None = None
        self.layout = PreviewLayout()

    @classmethod
    def open(
        cls,
        store: KeyValueStore,
        oracle: MeasurementOracle,
        surface: PreviewSurface,
        **kwargs: Any,
    ) -> "EditorSession":
        """Load the saved document (or start empty) and paginate once."""
        document = load_document(store, kwargs.get("storage_key", STORAGE_KEY)) or empty_document()
        session = cls(document, store, oracle, surface, **kwargs)
        session.recompute()
        return session

    def apply(self, command: Command) -> PaginationResult:
        command.apply(self.document)
        self.autosave.touch()
        return self.recompute()

    def tick(self) -> bool:
        """Host loop hook; saves once the autosave window has elapsed."""
        return self.autosave.poll()

    def recompute(self) -> PaginationResult:
        """Rebuild all pages from the current document."""
        previous_scroll = self.surface.scroll_top

        self.result = paginate_document(self.document, self.oracle)
        self.layout = layout_preview(PAGE_WIDTH, self.surface.width)
        self.surface.show(self.result, self.layout)

        self.surface.scroll_top = previous_scroll
        logger.debug(f"Preview: {self.result.label} at scale {self.layout.scale:.2f}")
        return self.result

    def resize(self, width: float) -> PreviewLayout:
        """Rescale the preview for a new viewing width without re-paginating."""
        self.surface.width = width
        self.layout = layout_preview(PAGE_WIDTH, width)
        self.surface.rescale(self.layout)
        return self.layout

    def save_now(self) -> None:
        self.autosave.cancel()
        save_document(self.store, self.document, self.storage_key)

    def export_text(self) -> str:
        return export_document(self.document)

    def import_text(self, text: str) -> bool:
        """Replace the document with an imported one; nothing changes on failure."""
        try:
            document = import_document(text)
        except DocumentFormatError as e:
            logger.warning(f"Rejected import: {e}")
            self.notify(INVALID_IMPORT_MESSAGE)
            return False

        self.document = document
        self.save_now()
        self.recompute()
        return True

    def reset(self, confirm: Callable[[], bool]) -> bool:
        """Erase the document after explicit confirmation."""
        if not confirm():
            return False
        self.document = empty_document()
        self.save_now()
        self.recompute()
        return True

    def print_pages(self, renderer: PageRenderer, output_path: Path, fmt: PrintFormat = "pdf") -> list[Path]:
        """Recompute, scroll the preview to the top, then hand the page tree to the renderer."""
        self.recompute()
        self.surface.scroll_top = 0.0
        pages = self.result.pages
        if fmt == "png":
            return renderer.save_png(pages, output_path)
        return [renderer.save_pdf(pages, output_path)]
