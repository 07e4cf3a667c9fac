#!/usr/bin/env python3
"""
PIL-based page measurement and rendering.

LayoutMeasurer answers the pagination engine's fit question by laying out a
page with real font metrics. PageRenderer draws the same layout to grayscale
images and writes PNG pages or a multi-page PDF for printing.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from config import (
    BASE_FONT_SIZE,
    BULLET_GLYPH,
    CONTENT_HEIGHT,
    CONTENT_WIDTH,
    LINE_HEIGHT_RATIO,
    MARGINS,
    PAGE,
    PAGE_HEIGHT,
    PAGE_WIDTH,
    TYPOGRAPHY,
)
from flattener import HeaderBlock, ItemBlock
from pagination import Fragment, Page, SectionShell

logger = logging.getLogger(__name__)

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


@dataclass
class FontFamily:
    """Font family with optional bold/italic variants."""

    regular: Path | None = None
    bold: Path | None = None
    italic: Path | None = None
    bold_italic: Path | None = None

    def get_path(self, bold: bool = False, italic: bool = False) -> Path | None:
        """Get font path for given style, with fallbacks."""
        if bold and italic:
            if self.bold_italic:
                return self.bold_italic
            elif self.bold:
                return self.bold
            elif self.italic:
                return self.italic
        elif bold:
            if self.bold:
                return self.bold
        elif italic:
            if self.italic:
                return self.italic
        return self.regular


@dataclass(frozen=True)
class TextRun:
    """A paragraph of text laid out with one font."""

    text: str
    size: int
    bold: bool = False
    italic: bool = False
    indent: int = 0
    fill: int = 0
    space_after: int = 0
    bullet: bool = False
    keep_empty: bool = False


class LayoutMeasurer:
    """Measure laid-out page content against the fixed page capacity."""

    def __init__(
        self,
        font_family: FontFamily | None = None,
        base_font_size: int = BASE_FONT_SIZE,
        cache_size: int = TYPOGRAPHY.HEIGHT_CACHE_SIZE,
    ):
        self.font_family = font_family or FontFamily()
        self.base_font_size = base_font_size
        self.content_width = CONTENT_WIDTH
        self.content_height = CONTENT_HEIGHT
        self._font_cache: dict[tuple[Path | None, int], Font] = {}
        self.cache_size = cache_size
        self._height_cache: OrderedDict[object, int] = OrderedDict()

    def get_font(self, size: int, bold: bool = False, italic: bool = False) -> Font:
        """Get or create cached font for given style."""
        font_path = self.font_family.get_path(bold, italic)
        key = (font_path, size)

        if key not in self._font_cache:
            if font_path is None:
                self._font_cache[key] = ImageFont.load_default(size=size)
            else:
                self._font_cache[key] = ImageFont.truetype(str(font_path), size)

        return self._font_cache[key]

    def measure_text(self, text: str, font: Font) -> tuple[int, int]:
        """Measure text width and height."""
        bbox = font.getbbox(text)
        return int(bbox[2] - bbox[0]), int(bbox[3] - bbox[1])

    def wrap_text(self, text: str, font: Font, max_width: int) -> list[str]:
        """
        Wrap text to fit within max_width pixels.
        Uses greedy algorithm with word boundaries.
        """
        words = text.split()
        if not words:
            return []

        lines: list[str] = []
        current_line: list[str] = []

        for word in words:
            test_line = " ".join(current_line + [word])
            width, _ = self.measure_text(test_line, font)

            if width <= max_width:
                current_line.append(word)
                continue

            if current_line:
                lines.append(" ".join(current_line))
            current_line = [word]

            # Break very long words character by character
            word_width, _ = self.measure_text(word, font)
            if word_width > max_width:
                current_chars: list[str] = []
                for char in word:
                    w, _ = self.measure_text("".join(current_chars + [char]), font)
                    if w <= max_width or not current_chars:
                        current_chars.append(char)
                    else:
                        lines.append("".join(current_chars))
                        current_chars = [char]
                current_line = ["".join(current_chars)]

        if current_line:
            lines.append(" ".join(current_line))

        return lines

    def line_height(self, size: int) -> int:
        return int(size * LINE_HEIGHT_RATIO)

    def run_lines(self, run: TextRun) -> list[str]:
        """Wrapped lines of a run; keep_empty runs always take one line."""
        font = self.get_font(run.size, run.bold, run.italic)
        lines = self.wrap_text(run.text, font, self.content_width - run.indent)
        if not lines and run.keep_empty:
            return [""]
        return lines

    def run_height(self, run: TextRun) -> int:
        lines = self.run_lines(run)
        if not lines:
            return 0
        return len(lines) * self.line_height(run.size) + run.space_after

    # -- layout ---------------------------------------------------------------

    def header_runs(self, header: HeaderBlock) -> list[TextRun]:
        runs = [
            TextRun(header.name, TYPOGRAPHY.NAME_FONT_SIZE, bold=True, keep_empty=True),
            TextRun(header.title, TYPOGRAPHY.TITLE_FONT_SIZE, fill=60, keep_empty=True),
            TextRun(header.contact_line, self.base_font_size, fill=80),
        ]
        if header.summary:
            runs.append(self.title_run("Summary"))
            runs.append(TextRun(header.summary, self.base_font_size))
        if header.skills_line:
            runs.append(self.title_run("Skills"))
            runs.append(TextRun(header.skills_line, self.base_font_size))
        return runs

    def title_run(self, title: str) -> TextRun:
        return TextRun(
            title,
            TYPOGRAPHY.SECTION_TITLE_FONT_SIZE,
            bold=True,
            space_after=TYPOGRAPHY.TITLE_SPACING,
            keep_empty=True,
        )

    def item_runs(self, item: ItemBlock) -> list[TextRun]:
        runs = [
            TextRun(item.role, self.base_font_size, bold=True),
            TextRun(item.meta, self.base_font_size, italic=True, fill=90),
            TextRun(item.summary, self.base_font_size),
        ]
        runs.extend(
            TextRun(bullet, self.base_font_size, indent=TYPOGRAPHY.BULLET_INDENT, bullet=True)
            for bullet in item.bullets
        )
        return runs

    # -- measurement ----------------------------------------------------------

    def _cached_height(self, key: object, runs: list[TextRun], spacing: int) -> int:
        """Least-recently-used height cache capped at cache_size entries."""
        if key in self._height_cache:
            self._height_cache.move_to_end(key)
            return self._height_cache[key]

        height = sum(self.run_height(run) for run in runs) + spacing
        self._height_cache[key] = height
        if len(self._height_cache) > self.cache_size:
            self._height_cache.popitem(last=False)
        return height

    def item_height(self, item: ItemBlock) -> int:
        return self._cached_height(item, self.item_runs(item), TYPOGRAPHY.ITEM_SPACING)

    def fragment_height(self, fragment: Fragment) -> int:
        """Height of a placed fragment including the gap below it."""
        if isinstance(fragment, SectionShell):
            title = self._cached_height(("title", fragment.title), [self.title_run(fragment.title)], 0)
            items = sum(self.item_height(item) for item in fragment.items)
            return title + items + TYPOGRAPHY.SECTION_SPACING
        return self._cached_height(fragment, self.header_runs(fragment), TYPOGRAPHY.HEADER_SPACING)

    def page_height(self, page: Page) -> int:
        return sum(self.fragment_height(fragment) for fragment in page.fragments)

    def fits(self, page: Page) -> bool:
        """True when the page's content height is within the page capacity."""
        return self.page_height(page) <= self.content_height


class PageRenderer(LayoutMeasurer):
    """Render paginated pages to PIL images."""

    def render_page(self, page: Page, total_pages: int | None = None) -> Image.Image:
        """
        Render a page of content to a PIL Image.

        Returns grayscale ('L' mode) image of PAGE_WIDTH x PAGE_HEIGHT.
        """
        image = Image.new("L", (PAGE_WIDTH, PAGE_HEIGHT), 255)
        draw = ImageDraw.Draw(image)

        y = MARGINS["top"]
        for fragment in page.fragments:
            if isinstance(fragment, SectionShell):
                y = self._draw_run(draw, self.title_run(fragment.title), y)
                for item in fragment.items:
                    for run in self.item_runs(item):
                        y = self._draw_run(draw, run, y)
                    y += TYPOGRAPHY.ITEM_SPACING
                y += TYPOGRAPHY.SECTION_SPACING
            else:
                for run in self.header_runs(fragment):
                    y = self._draw_run(draw, run, y)
                y += TYPOGRAPHY.HEADER_SPACING

        self._render_page_number(draw, page.number, total_pages)
        return image

    def _draw_run(self, draw: ImageDraw.ImageDraw, run: TextRun, y: int) -> int:
        font = self.get_font(run.size, run.bold, run.italic)
        lines = self.run_lines(run)
        if not lines:
            return y

        x = MARGINS["left"] + run.indent
        line_height = self.line_height(run.size)
        for index, line in enumerate(lines):
            if run.bullet and index == 0:
                draw.text((x - TYPOGRAPHY.BULLET_INDENT + 4, y), BULLET_GLYPH, fill=run.fill, font=font)
            draw.text((x, y), line, fill=run.fill, font=font)
            y += line_height

        return y + run.space_after

    def _render_page_number(
        self,
        draw: ImageDraw.ImageDraw,
        page_number: int,
        total_pages: int | None = None,
    ) -> None:
        """Render page number at bottom center."""
        font = self.get_font(TYPOGRAPHY.FOOTER_FONT_SIZE)

        if total_pages:
            text = f"{page_number} / {total_pages}"
        else:
            text = str(page_number)

        width, _ = self.measure_text(text, font)
        x = (PAGE_WIDTH - width) // 2
        y = PAGE_HEIGHT - MARGINS["bottom"] + 16

        draw.text((x, y), text, fill=128, font=font)

    def render_pages(self, pages: list[Page]) -> list[Image.Image]:
        total = len(pages)
        return [self.render_page(page, total) for page in pages]

    def save_pdf(self, pages: list[Page], output_path: Path) -> Path:
        """Write all pages into one PDF file."""
        images = self.render_pages(pages)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        images[0].save(
            output_path,
            "PDF",
            resolution=float(PAGE.DPI),
            save_all=True,
            append_images=images[1:],
        )
        logger.info(f"Wrote {len(images)} page(s) to {output_path}")
        return output_path

    def save_png(self, pages: list[Page], output_dir: Path) -> list[Path]:
        """Write one PNG file per page."""
        output_dir.mkdir(parents=True, exist_ok=True)
        paths = []
        for page, image in zip(pages, self.render_pages(pages)):
            path = output_dir / f"page-{page.number:03d}.png"
            image.save(path, "PNG")
            paths.append(path)
        logger.info(f"Wrote {len(paths)} page image(s) to {output_dir}")
        return paths
