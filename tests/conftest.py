"""Shared fixtures: a deterministic measurement oracle and sample documents."""

import pytest

from document_model import Document, new_item
from flattener import HeaderBlock, ItemBlock, SectionBlock
from pagination import Page, SectionShell


class TableOracle:
    """
    Oracle with fixed heights: header, section title, and items looked up by
    their role text (falling back to a default item height).
    """

    def __init__(self, capacity=100, header_height=20, title_height=5, item_height=10, heights=None):
        self.capacity = capacity
        self.header_height = header_height
        self.title_height = title_height
        self.item_height = item_height
        self.heights = heights or {}
        self.calls = 0

    def fragment_height(self, fragment):
        if isinstance(fragment, SectionShell):
            return self.title_height + sum(
                self.heights.get(item.role, self.item_height) for item in fragment.items
            )
        return self.header_height

    def fits(self, page: Page) -> bool:
        self.calls += 1
        return sum(self.fragment_height(f) for f in page.fragments) <= self.capacity


def make_section(key, count, title=None, roles=None):
    roles = roles or [f"{key} {i + 1}" for i in range(count)]
    return SectionBlock(
        key=key,
        title=title or key.title(),
        items=tuple(ItemBlock(role=role) for role in roles),
    )


@pytest.fixture
def make_oracle():
    return TableOracle


@pytest.fixture
def section():
    return make_section


@pytest.fixture
def header():
    return HeaderBlock(name="Ada Lovelace", title="Analyst")


@pytest.fixture
def full_document():
    """A document with every section populated."""
    document = Document()
    document.contact.full_name = "Ada Lovelace"
    document.contact.title = "Analyst"
    document.contact.email = "ada@example.com"
    document.contact.link = "https://example.com"
    document.summary = "Writes programs for engines."
    document.skills = ["Mathematics", "Notation"]

    for key in ("experience", "education", "projects", "licenses", "certifications",
                "awards", "research", "references"):
        item = new_item(key)
        first_field = next(iter(item))
        item[first_field] = f"{key} entry"
        document.section_items(key).append(item)

    document.others.section_title = "Volunteering"
    document.others.items.append({"heading": "Mentor", "subheading": "", "meta": "", "link": "", "bullets": []})
    return document
