#!/usr/bin/env python3
"""
Flatten a resume document into render blocks.

Produces the header block followed by one section block per populated
section, in the fixed section order.
"""

from dataclasses import dataclass
from typing import Any, Union

from config import META_SEPARATOR, RANGE_SEPARATOR, ROLE_SEPARATOR, SKILL_SEPARATOR
from document_model import BULLET_FIELDS, OTHERS_DEFAULT_TITLE, SECTION_ORDER, Document


@dataclass(frozen=True)
class HeaderBlock:
    """Contact header, always the first block."""

    name: str = ""
    title: str = ""
    contact_line: str = ""
    summary: str = ""
    skills_line: str = ""


@dataclass(frozen=True)
class ItemBlock:
    """One entry of a section, projected to display lines."""

    role: str = ""
    meta: str = ""
    summary: str = ""
    bullets: tuple[str, ...] = ()


@dataclass(frozen=True)
class SectionBlock:
    """A titled section and its items."""

    key: str
    title: str
    items: tuple[ItemBlock, ...] = ()


RenderBlock = Union[HeaderBlock, SectionBlock]


@dataclass(frozen=True)
class SectionLayout:
    """
    Field mapping for projecting an item of one section kind.

    role_fields: joined with an em dash
    meta_parts: each part is a tuple of fields; multi-field parts are ranges
    summary_parts: (prefix, field) pairs
    """

    title: str
    role_fields: tuple[str, ...]
    meta_parts: tuple[tuple[str, ...], ...] = ()
    summary_parts: tuple[tuple[str, str], ...] = ()


_CREDENTIAL_LAYOUT = dict(
    role_fields=("name", "issuer"),
    meta_parts=(("issued", "expires"), ("location",)),
    summary_parts=(("ID: ", "credId"), ("", "credUrl")),
)

SECTION_LAYOUTS: dict[str, SectionLayout] = {
    "experience": SectionLayout(
        title="Experience",
        role_fields=("role", "company"),
        meta_parts=(("location",), ("start", "end")),
    ),
    "education": SectionLayout(
        title="Education",
        role_fields=("degree", "school"),
        meta_parts=(("location",), ("year",)),
    ),
    "projects": SectionLayout(
        title="Projects",
        role_fields=("name", "link"),
        summary_parts=(("", "summary"),),
    ),
    "licenses": SectionLayout(title="Licenses", **_CREDENTIAL_LAYOUT),
    "certifications": SectionLayout(title="Certifications", **_CREDENTIAL_LAYOUT),
    "awards": SectionLayout(
        title="Awards",
        role_fields=("title", "issuer"),
        meta_parts=(("date",), ("scope",), ("location",)),
        summary_parts=(("", "summary"),),
    ),
    "research": SectionLayout(
        title="Published Research",
        role_fields=("title", "venue"),
        meta_parts=(("pubDate",), ("url",), ("authors",)),
        summary_parts=(("", "summary"),),
    ),
    "others": SectionLayout(
        title=OTHERS_DEFAULT_TITLE,
        role_fields=("heading", "subheading"),
        meta_parts=(("meta",), ("link",)),
    ),
    "references": SectionLayout(
        title="References",
        role_fields=("name", "role"),
        meta_parts=(("company",), ("rel",), ("email",), ("phone",), ("url",)),
        summary_parts=(("", "note"),),
    ),
}


def _field(item: dict[str, Any], name: str) -> str:
    value = item.get(name)
    if value is None:
        return ""
    return str(value).strip()


def _join(parts, separator: str) -> str:
    return separator.join(p for p in parts if p)


def filter_bullets(raw: Any) -> tuple[str, ...]:
    """Keep non-blank bullets in order; anything but a list yields none."""
    if not isinstance(raw, list):
        return ()
    return tuple(str(b).strip() for b in raw if b is not None and str(b).strip())


def project_item(layout: SectionLayout, item: dict[str, Any], bullets_field: str = "bullets") -> ItemBlock:
    """Project an item record to role/meta/summary/bullets lines."""
    role = _join((_field(item, f) for f in layout.role_fields), ROLE_SEPARATOR)
    meta = _join(
        (_join((_field(item, f) for f in part), RANGE_SEPARATOR) for part in layout.meta_parts),
        META_SEPARATOR,
    )
    summary = _join(
        (prefix + _field(item, f) if _field(item, f) else "" for prefix, f in layout.summary_parts),
        META_SEPARATOR,
    )
    return ItemBlock(
        role=role,
        meta=meta,
        summary=summary,
        bullets=filter_bullets(item.get(bullets_field)),
    )


def build_header(document: Document) -> HeaderBlock:
    """Build the contact header from contact, summary and skills."""
    contact = document.contact
    return HeaderBlock(
        name=contact.full_name.strip(),
        title=contact.title.strip(),
        contact_line=_join(
            (s.strip() for s in (contact.email, contact.phone, contact.location, contact.link)),
            META_SEPARATOR,
        ),
        summary=document.summary.strip(),
        skills_line=_join((s.strip() for s in document.skills), SKILL_SEPARATOR),
    )


def section_title(document: Document, key: str) -> str:
    """Display title for a section; the others section uses its own title."""
    if key == "others":
        return document.others.section_title.strip() or OTHERS_DEFAULT_TITLE
    return SECTION_LAYOUTS[key].title


def flatten(document: Document) -> list[RenderBlock]:
    """Turn the document into the ordered list of render blocks."""
    blocks: list[RenderBlock] = [build_header(document)]

    for key in SECTION_ORDER:
        items = document.section_items(key)
        if not items:
            continue
        layout = SECTION_LAYOUTS[key]
        blocks.append(
            SectionBlock(
                key=key,
                title=section_title(document, key),
                items=tuple(project_item(layout, item, BULLET_FIELDS[key]) for item in items),
            )
        )

    return blocks
