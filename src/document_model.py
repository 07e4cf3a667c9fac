#!/usr/bin/env python3
"""
In-memory resume document.

Holds contact details, summary, skills and the repeatable sections, plus the
conversion to and from the JSON wire shape used by export, import and storage.
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Any

from config import DOCUMENT_VERSION

logger = logging.getLogger(__name__)

OTHERS_DEFAULT_TITLE = "Others"

# Fixed order in which sections are flowed onto pages
SECTION_ORDER = (
    "experience",
    "education",
    "projects",
    "licenses",
    "certifications",
    "awards",
    "research",
    "others",
    "references",
)

# Blank record per section kind, as created by the "Add" buttons
ITEM_TEMPLATES: dict[str, dict[str, Any]] = {
    "experience": {"role": "", "company": "", "location": "", "start": "", "end": "", "bullets": []},
    "education": {"degree": "", "school": "", "location": "", "year": "", "details": []},
    "projects": {"name": "", "link": "", "summary": "", "bullets": []},
    "licenses": {
        "name": "",
        "issuer": "",
        "issued": "",
        "expires": "",
        "credId": "",
        "credUrl": "",
        "location": "",
        "bullets": [],
    },
    "certifications": {
        "name": "",
        "issuer": "",
        "issued": "",
        "expires": "",
        "credId": "",
        "credUrl": "",
        "location": "",
        "bullets": [],
    },
    "awards": {"title": "", "issuer": "", "date": "", "scope": "", "location": "", "summary": "", "bullets": []},
    "research": {"title": "", "venue": "", "pubDate": "", "url": "", "authors": "", "summary": "", "bullets": []},
    "others": {"heading": "", "subheading": "", "meta": "", "link": "", "bullets": []},
    "references": {
        "name": "",
        "role": "",
        "company": "",
        "rel": "",
        "email": "",
        "phone": "",
        "url": "",
        "note": "",
        "bullets": [],
    },
}

# Education keeps its bullet list under a different key
BULLET_FIELDS = {key: ("details" if key == "education" else "bullets") for key in SECTION_ORDER}


class DocumentFormatError(ValueError):
    """Raised when a payload cannot be turned into a Document."""


@dataclass
class Contact:
    """Contact block shown at the top of the first page."""

    full_name: str = ""
    title: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    link: str = ""


@dataclass
class OthersSection:
    """Free-form section whose title the user can rename."""

    section_title: str = OTHERS_DEFAULT_TITLE
    items: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class Document:
    """The whole resume; section collections always exist."""

    version: int = DOCUMENT_VERSION
    contact: Contact = field(default_factory=Contact)
    summary: str = ""
    skills: list[str] = field(default_factory=list)
    experience: list[dict[str, Any]] = field(default_factory=list)
    education: list[dict[str, Any]] = field(default_factory=list)
    projects: list[dict[str, Any]] = field(default_factory=list)
    licenses: list[dict[str, Any]] = field(default_factory=list)
    certifications: list[dict[str, Any]] = field(default_factory=list)
    awards: list[dict[str, Any]] = field(default_factory=list)
    research: list[dict[str, Any]] = field(default_factory=list)
    others: OthersSection = field(default_factory=OthersSection)
    references: list[dict[str, Any]] = field(default_factory=list)

    def section_items(self, key: str) -> list[dict[str, Any]]:
        """Return the live item list for a section kind."""
        if key not in SECTION_ORDER:
            raise KeyError(f"Unknown section: {key}")
        if key == "others":
            return self.others.items
        return getattr(self, key)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON wire shape (deep copy)."""
        data: dict[str, Any] = {
            "version": self.version,
            "contact": {
                "fullName": self.contact.full_name,
                "title": self.contact.title,
                "email": self.contact.email,
                "phone": self.contact.phone,
                "location": self.contact.location,
                "links": [{"label": "", "url": self.contact.link}],
            },
            "summary": self.summary,
            "skills": list(self.skills),
        }
        for key in SECTION_ORDER:
            if key == "others":
                data["others"] = {
                    "sectionTitle": self.others.section_title,
                    "items": copy.deepcopy(self.others.items),
                }
            else:
                data[key] = copy.deepcopy(getattr(self, key))
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "Document":
        """
        Build a Document from a decoded JSON payload.

        Missing collections default to empty; a missing or blank others title
        defaults to "Others". Raises DocumentFormatError for payloads that are
        not objects or whose sections hold non-object items.
        """
        if not isinstance(data, dict):
            raise DocumentFormatError(f"Expected a JSON object, got {type(data).__name__}")

        version = data.get("version", DOCUMENT_VERSION)
        if not isinstance(version, int) or isinstance(version, bool):
            raise DocumentFormatError(f"Invalid document version: {version!r}")
        if version > DOCUMENT_VERSION:
            logger.warning(f"Document version {version} is newer than supported {DOCUMENT_VERSION}")

        raw_contact = data.get("contact") or {}
        if not isinstance(raw_contact, dict):
            raise DocumentFormatError("contact must be an object")
        links = raw_contact.get("links") or []
        link = ""
        if isinstance(links, list) and links and isinstance(links[0], dict):
            link = _text(links[0].get("url"))

        document = cls(
            version=version,
            contact=Contact(
                full_name=_text(raw_contact.get("fullName")),
                title=_text(raw_contact.get("title")),
                email=_text(raw_contact.get("email")),
                phone=_text(raw_contact.get("phone")),
                location=_text(raw_contact.get("location")),
                link=link,
            ),
            summary=_text(data.get("summary")),
            skills=_skills(data.get("skills")),
        )

        for key in SECTION_ORDER:
            if key == "others":
                raw_others = data.get("others") or {}
                if not isinstance(raw_others, dict):
                    raise DocumentFormatError("others must be an object")
                document.others = OthersSection(
                    section_title=_text(raw_others.get("sectionTitle")) or OTHERS_DEFAULT_TITLE,
                    items=_items(key, raw_others.get("items")),
                )
            else:
                setattr(document, key, _items(key, data.get(key)))

        return document


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _skills(raw: Any) -> list[str]:
    if isinstance(raw, str):
        return split_skills(raw)
    if not isinstance(raw, list):
        return []
    return [_text(s) for s in raw if s is not None]


def _items(key: str, raw: Any) -> list[dict[str, Any]]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        logger.debug(f"Section {key} is not a list, resetting to empty")
        return []
    items = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            raise DocumentFormatError(f"{key}[{index}] must be an object")
        items.append(copy.deepcopy(item))
    return items


def empty_document() -> Document:
    """Return a fresh default document."""
    return Document()


def new_item(section: str) -> dict[str, Any]:
    """Return a blank item record for a section kind."""
    if section not in ITEM_TEMPLATES:
        raise KeyError(f"Unknown section: {section}")
    return copy.deepcopy(ITEM_TEMPLATES[section])


def split_skills(text: str) -> list[str]:
    """Split comma-separated skills into trimmed, non-empty labels."""
    return [s.strip() for s in (text or "").split(",") if s.strip()]
