"""Unit tests for turning a document into render blocks."""

from document_model import Document, new_item
from flattener import (
    SECTION_LAYOUTS,
    HeaderBlock,
    ItemBlock,
    SectionBlock,
    build_header,
    filter_bullets,
    flatten,
    project_item,
)


class TestHeader:
    """Tests for the contact header block."""

    def test_empty_document_still_has_header(self):
        """An empty document flattens to a single, blank header."""
        blocks = flatten(Document())
        assert blocks == [HeaderBlock()]

    def test_contact_line_joins_non_empty_parts(self):
        document = Document()
        document.contact.email = "ada@example.com"
        document.contact.location = "London"
        document.contact.link = "https://example.com"
        header = build_header(document)
        assert header.contact_line == "ada@example.com • London • https://example.com"

    def test_summary_trimmed_and_skills_joined(self):
        document = Document(summary="  Builds engines.  ", skills=["Python", " Pillow "])
        header = build_header(document)
        assert header.summary == "Builds engines."
        assert header.skills_line == "Python · Pillow"


class TestSections:
    """Tests for section ordering and omission."""

    def test_empty_sections_are_omitted(self):
        document = Document()
        document.projects.append(new_item("projects"))
        blocks = flatten(document)
        assert [type(b) for b in blocks] == [HeaderBlock, SectionBlock]
        assert blocks[1].key == "projects"

    def test_fixed_section_order_and_titles(self, full_document):
        blocks = flatten(full_document)
        assert isinstance(blocks[0], HeaderBlock)
        assert [(b.key, b.title) for b in blocks[1:]] == [
            ("experience", "Experience"),
            ("education", "Education"),
            ("projects", "Projects"),
            ("licenses", "Licenses"),
            ("certifications", "Certifications"),
            ("awards", "Awards"),
            ("research", "Published Research"),
            ("others", "Volunteering"),
            ("references", "References"),
        ]

    def test_others_blank_title_falls_back(self):
        document = Document()
        document.others.section_title = "   "
        document.others.items.append(new_item("others"))
        assert flatten(document)[1].title == "Others"

    def test_others_without_items_is_omitted(self):
        document = Document()
        document.others.section_title = "Hobbies"
        assert len(flatten(document)) == 1

    def test_one_item_block_per_entry(self):
        document = Document()
        document.experience.extend([new_item("experience") for _ in range(3)])
        assert len(flatten(document)[1].items) == 3


class TestProjectItem:
    """Tests for the per-kind item projection."""

    def test_experience_role_meta_and_bullets(self):
        item = {
            "role": "Engineer",
            "company": "Analytical Co",
            "location": "London",
            "start": "Jan 2020",
            "end": "Present",
            "bullets": ["Built the mill", "", "   ", "Wrote notes"],
        }
        block = project_item(SECTION_LAYOUTS["experience"], item)
        assert block == ItemBlock(
            role="Engineer — Analytical Co",
            meta="London • Jan 2020 – Present",
            summary="",
            bullets=("Built the mill", "Wrote notes"),
        )

    def test_role_skips_empty_parts(self):
        block = project_item(SECTION_LAYOUTS["experience"], {"role": "", "company": "Analytical Co"})
        assert block.role == "Analytical Co"
        assert block.meta == ""

    def test_education_uses_details_as_bullets(self):
        document = Document()
        document.education.append(
            {"degree": "BSc", "school": "Uni", "location": "", "year": "1833", "details": ["First class"]}
        )
        item = flatten(document)[1].items[0]
        assert item.role == "BSc — Uni"
        assert item.meta == "1833"
        assert item.bullets == ("First class",)

    def test_license_credentials_become_summary(self):
        item = {
            "name": "PE",
            "issuer": "Board",
            "issued": "Jun 2024",
            "expires": "",
            "credId": "X-1",
            "credUrl": "https://cred.example",
            "location": "Remote",
        }
        block = project_item(SECTION_LAYOUTS["licenses"], item)
        assert block.meta == "Jun 2024 • Remote"
        assert block.summary == "ID: X-1 • https://cred.example"

    def test_reference_meta_and_note(self):
        item = new_item("references")
        item.update(name="Charles", role="Mentor", company="Cambridge", email="cb@example.com", note="Available")
        block = project_item(SECTION_LAYOUTS["references"], item)
        assert block.role == "Charles — Mentor"
        assert block.meta == "Cambridge • cb@example.com"
        assert block.summary == "Available"

    def test_project_link_in_role_line(self):
        item = {"name": "Engine", "link": "https://engine.example", "summary": "A machine"}
        block = project_item(SECTION_LAYOUTS["projects"], item)
        assert block.role == "Engine — https://engine.example"
        assert block.summary == "A machine"
        assert block.bullets == ()


class TestFilterBullets:
    def test_non_list_yields_nothing(self):
        assert filter_bullets(None) == ()
        assert filter_bullets("text") == ()

    def test_blank_and_none_removed(self):
        assert filter_bullets(["a", None, " ", "b "]) == ("a", "b")


def test_flatten_is_pure(full_document):
    before = full_document.to_dict()
    assert flatten(full_document) == flatten(full_document)
    assert full_document.to_dict() == before
