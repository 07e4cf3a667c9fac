#!/usr/bin/env python3
"""
Page flow for resume rendering.

Packs render blocks into fixed-capacity pages using a measurement oracle.
Placement is greedy and strictly forward: once a later page is started,
earlier pages never receive more content.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Protocol, Union

from document_model import Document
from flattener import HeaderBlock, ItemBlock, RenderBlock, SectionBlock, flatten

logger = logging.getLogger(__name__)


@dataclass
class SectionShell:
    """Open section container on a page; items stream into it."""

    key: str
    title: str
    items: list[ItemBlock] = field(default_factory=list)
    continued: bool = False


Fragment = Union[HeaderBlock, SectionShell]


@dataclass
class Page:
    """Content for a single page."""

    number: int
    fragments: list[Fragment] = field(default_factory=list)
    overflow: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.fragments


@dataclass
class PaginationResult:
    """Result of pagination process."""

    pages: list[Page]
    total_pages: int = 0
    label: str = ""


class MeasurementOracle(Protocol):
    """Reports whether a page's content fits its fixed capacity."""

    def fits(self, page: Page) -> bool: ...


def describe_page_count(page_count: int) -> str:
    """Human-readable page count."""
    if page_count == 1:
        return "1 page"
    return f"{page_count} pages"


class _Flow:
    """Mutable state of one pagination pass."""

    def __init__(self, oracle: MeasurementOracle):
        self.oracle = oracle
        self.pages: list[Page] = [Page(number=1)]

    @property
    def current_page(self) -> Page:
        return self.pages[-1]

    def open_page(self) -> Page:
        """Start a new page; a still-empty current page is reused."""
        if self.current_page.is_empty:
            return self.current_page
        page = Page(number=len(self.pages) + 1)
        self.pages.append(page)
        return page

    def try_append(self, fragment: Fragment) -> bool:
        """Tentatively append to the current page, rolling back on overflow."""
        page = self.current_page
        page.fragments.append(fragment)
        if self.oracle.fits(page):
            return True
        page.fragments.pop()
        return False

    def force(self, fragment: Fragment, description: str) -> None:
        """Place on a fresh page without a fit check that could trigger a retry."""
        reused = self.current_page.is_empty
        page = self.open_page()
        page.fragments.append(fragment)
        # An empty page that already rejected the unit is known to overflow
        if reused or not self.oracle.fits(page):
            page.overflow = True
            logger.warning(f"{description} does not fit an empty page; placed on page {page.number} anyway")
        else:
            logger.debug(f"{description} moved to page {page.number}")

    def place_unit(self, fragment: Fragment, description: str) -> None:
        if not self.try_append(fragment):
            self.force(fragment, description)

    def place_section(self, section: SectionBlock) -> None:
        """
        Place a section with keep-with-next and title repeat.

        The title travels with the first item as one anchor. Each further item
        is appended to the open shell; an item that overflows starts a new
        page under a fresh shell repeating the title.
        """
        if section.items:
            shell = SectionShell(key=section.key, title=section.title, items=[section.items[0]])
        else:
            shell = SectionShell(key=section.key, title=section.title)
        self.place_unit(shell, f"Section '{section.title}' anchor")

        for index, item in enumerate(section.items[1:], start=2):
            page = self.current_page
            shell.items.append(item)
            if self.oracle.fits(page):
                continue

            shell.items.pop()
            page = self.open_page()
            shell = SectionShell(key=section.key, title=section.title, items=[item], continued=True)
            page.fragments.append(shell)
            if self.oracle.fits(page):
                logger.debug(f"Section '{section.title}' continues on page {page.number} at item {index}")
            else:
                page.overflow = True
                logger.warning(
                    f"Item {index} of section '{section.title}' does not fit an empty page; "
                    f"placed on page {page.number} anyway"
                )


class Paginator:
    """Flow render blocks into fixed-size pages."""

    def __init__(self, oracle: MeasurementOracle):
        self.oracle = oracle

    def paginate(self, blocks: Iterable[RenderBlock]) -> PaginationResult:
        """
        Flow blocks into pages.

        Features:
        - Header placed first, never split
        - Section title kept with its first item
        - Section title repeated when items continue on a new page
        - Units too tall for an empty page are still placed (flagged overflow)
        """
        flow = _Flow(self.oracle)

        for block in blocks:
            if isinstance(block, SectionBlock):
                flow.place_section(block)
            else:
                flow.place_unit(block, type(block).__name__)

        pages = flow.pages
        logger.debug(f"Paginated into {len(pages)} page(s)")
        return PaginationResult(
            pages=pages,
            total_pages=len(pages),
            label=describe_page_count(len(pages)),
        )


def paginate_document(document: Document, oracle: MeasurementOracle) -> PaginationResult:
    """Flatten a document and paginate it."""
    return Paginator(oracle).paginate(flatten(document))
