"""
Tests for Pillow-based measurement and rendering.

Uses Pillow's built-in scalable font so no font files are needed.
"""

from config import CONTENT_HEIGHT, CONTENT_WIDTH, PAGE_HEIGHT, PAGE_WIDTH
from document_model import Document, new_item
from editor_session import AddItem, EditorSession, PreviewPane, SetField
from flattener import HeaderBlock, ItemBlock
from page_renderer import FontFamily, LayoutMeasurer, PageRenderer, TextRun
from pagination import Page, SectionShell, paginate_document
from persistence import MemoryStore
from resume_cli import render_resume


def long_document(entries=40):
    document = Document()
    document.contact.full_name = "Ada Lovelace"
    for i in range(entries):
        item = new_item("experience")
        item.update(role=f"Engineer {i}", company="Analytical Co", start="2020", end="2024")
        item["bullets"] = [f"Delivered milestone {n} of the difference engine programme" for n in range(3)]
        document.experience.append(item)
    return document


class TestFontFamily:
    def test_fallbacks(self, tmp_path):
        regular, bold = tmp_path / "r.ttf", tmp_path / "b.ttf"
        family = FontFamily(regular=regular, bold=bold)
        assert family.get_path() == regular
        assert family.get_path(bold=True) == bold
        assert family.get_path(italic=True) == regular
        assert family.get_path(bold=True, italic=True) == bold

    def test_default_font_when_no_file(self):
        measurer = LayoutMeasurer()
        assert measurer.get_font(14) is measurer.get_font(14)


class TestWrapText:
    """Tests for greedy word wrapping."""

    def test_empty_text(self):
        measurer = LayoutMeasurer()
        assert measurer.wrap_text("", measurer.get_font(14), 100) == []
        assert measurer.wrap_text("   ", measurer.get_font(14), 100) == []

    def test_lines_fit_width(self):
        measurer = LayoutMeasurer()
        font = measurer.get_font(14)
        text = "the quick brown fox jumps over the lazy dog " * 6
        lines = measurer.wrap_text(text, font, 150)
        assert len(lines) > 1
        assert " ".join(lines) == text.strip()
        for line in lines:
            assert measurer.measure_text(line, font)[0] <= 150

    def test_long_word_is_broken(self):
        measurer = LayoutMeasurer()
        font = measurer.get_font(14)
        lines = measurer.wrap_text("x" * 200, font, 60)
        assert len(lines) > 1
        assert "".join(lines) == "x" * 200

    def test_keep_empty_run_takes_a_line(self):
        measurer = LayoutMeasurer()
        assert measurer.run_lines(TextRun("", 20, keep_empty=True)) == [""]
        assert measurer.run_height(TextRun("", 20)) == 0


class TestMeasurement:
    """Tests for the fit oracle."""

    def test_blank_header_has_height(self):
        assert LayoutMeasurer().fragment_height(HeaderBlock()) > 0

    def test_bullets_add_height(self):
        measurer = LayoutMeasurer()
        plain = ItemBlock(role="Engineer")
        bulleted = ItemBlock(role="Engineer", bullets=("one", "two"))
        assert measurer.item_height(bulleted) > measurer.item_height(plain)

    def test_small_page_fits(self):
        page = Page(number=1, fragments=[HeaderBlock(name="Ada")])
        assert LayoutMeasurer().fits(page) is True

    def test_overfull_page_does_not_fit(self):
        shell = SectionShell(key="experience", title="Experience", items=[ItemBlock(role=f"r{i}") for i in range(200)])
        page = Page(number=1, fragments=[shell])
        measurer = LayoutMeasurer()
        assert measurer.page_height(page) > CONTENT_HEIGHT
        assert measurer.fits(page) is False

    def test_measurement_is_stable(self):
        measurer = LayoutMeasurer()
        item = ItemBlock(role="Engineer", meta="London", bullets=("a",))
        assert measurer.item_height(item) == measurer.item_height(item)
        assert measurer.content_width == CONTENT_WIDTH


class TestPaginateWithMeasurer:
    """End-to-end pagination with real font metrics."""

    def test_short_document_is_one_page(self):
        document = Document()
        document.contact.full_name = "Ada Lovelace"
        document.contact.title = "Analyst"
        result = paginate_document(document, LayoutMeasurer())
        assert result.total_pages == 1
        assert result.pages[0].fragments[0].name == "Ada Lovelace"

    def test_long_document_spans_pages_with_titles(self):
        measurer = LayoutMeasurer()
        result = paginate_document(long_document(), measurer)

        assert result.total_pages > 1
        assert not any(page.overflow for page in result.pages)
        for page in result.pages:
            assert measurer.fits(page)
        for page in result.pages[1:]:
            assert page.fragments[0].title == "Experience"
            assert page.fragments[0].continued is True


class TestPageRenderer:
    """Tests for rasterizing and writing pages."""

    def test_render_page_size(self):
        renderer = PageRenderer()
        page = Page(number=1, fragments=[HeaderBlock(name="Ada", summary="Programs")])
        image = renderer.render_page(page, total_pages=1)
        assert image.size == (PAGE_WIDTH, PAGE_HEIGHT)
        assert image.mode == "L"
        assert image.getextrema()[0] < 255

    def test_save_pdf(self, tmp_path):
        renderer = PageRenderer()
        result = paginate_document(long_document(), renderer)
        path = renderer.save_pdf(result.pages, tmp_path / "out" / "resume.pdf")
        assert path.read_bytes().startswith(b"%PDF")

    def test_save_png(self, tmp_path):
        renderer = PageRenderer()
        result = paginate_document(long_document(), renderer)
        paths = renderer.save_png(result.pages, tmp_path)
        assert len(paths) == result.total_pages
        assert paths[0].name == "page-001.png"


def test_render_resume_stats(tmp_path):
    stats = render_resume(long_document(), tmp_path / "resume.pdf", FontFamily(), available_width=397)
    assert stats["pages"] > 1
    assert stats["label"] == f"{stats['pages']} pages"
    assert stats["scale"] == 0.5
    assert stats["overflowing"] == []
    assert stats["files"] == [tmp_path / "resume.pdf"]


class TestHeightCache:
    """Tests for the bounded measurement cache."""

    def test_cache_stays_bounded_across_edits(self):
        """A long editing session keeps at most cache_size measured blocks."""
        measurer = LayoutMeasurer(cache_size=16)
        session = EditorSession.open(MemoryStore(), measurer, PreviewPane())
        session.apply(AddItem("experience"))
        for i in range(200):
            session.apply(SetField(("experience", 0, "role"), "x" * i))
            session.apply(SetField(("summary",), "s" * i))

        assert len(measurer._height_cache) <= 16

    def test_evicted_heights_are_remeasured_identically(self):
        measurer = LayoutMeasurer(cache_size=2)
        first = ItemBlock(role="Engineer", bullets=("one",))
        height = measurer.item_height(first)
        for i in range(5):
            measurer.item_height(ItemBlock(role=f"Other {i}"))

        assert first not in measurer._height_cache
        assert measurer.item_height(first) == height

    def test_recently_used_entry_survives(self):
        measurer = LayoutMeasurer(cache_size=2)
        kept, dropped, newest = ItemBlock(role="a"), ItemBlock(role="b"), ItemBlock(role="c")
        measurer.item_height(kept)
        measurer.item_height(dropped)
        measurer.item_height(kept)
        measurer.item_height(newest)

        assert list(measurer._height_cache) == [kept, newest]
