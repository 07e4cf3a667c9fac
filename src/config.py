#!/usr/bin/env python3
"""
Centralized configuration for paged-resume.

Contains all constants for page geometry, typography, preview scaling and
storage. Single source of truth for sheet and layout constants.
"""

from dataclasses import dataclass

# =============================================================================
# Page Geometry
# =============================================================================


@dataclass(frozen=True)
class PageGeometry:
    """A4 sheet at 96 DPI (CSS pixels)."""

    WIDTH: int = 794
    HEIGHT: int = 1123
    DPI: int = 96


PAGE = PageGeometry()

# Convenience aliases
PAGE_WIDTH = PAGE.WIDTH
PAGE_HEIGHT = PAGE.HEIGHT


# =============================================================================
# Margins
# =============================================================================


@dataclass(frozen=True)
class MarginsConfig:
    """Page margin settings (half an inch on every side)."""

    TOP: int = 48
    BOTTOM: int = 48
    LEFT: int = 48
    RIGHT: int = 48


MARGINS_CONFIG = MarginsConfig()

MARGINS = {
    "top": MARGINS_CONFIG.TOP,
    "bottom": MARGINS_CONFIG.BOTTOM,
    "left": MARGINS_CONFIG.LEFT,
    "right": MARGINS_CONFIG.RIGHT,
}

CONTENT_WIDTH = PAGE_WIDTH - MARGINS["left"] - MARGINS["right"]
CONTENT_HEIGHT = PAGE_HEIGHT - MARGINS["top"] - MARGINS["bottom"]


# =============================================================================
# Typography Settings
# =============================================================================


@dataclass(frozen=True)
class TypographyConfig:
    """Typography settings for measuring and rendering pages."""

    BASE_FONT_SIZE: int = 14
    NAME_FONT_SIZE: int = 26
    TITLE_FONT_SIZE: int = 16
    SECTION_TITLE_FONT_SIZE: int = 16
    FOOTER_FONT_SIZE: int = 11
    LINE_HEIGHT_RATIO: float = 1.4
    HEADER_SPACING: int = 18
    SECTION_SPACING: int = 14
    TITLE_SPACING: int = 6
    ITEM_SPACING: int = 8
    BULLET_INDENT: int = 18
    HEIGHT_CACHE_SIZE: int = 512  # measured blocks kept per measurer


TYPOGRAPHY = TypographyConfig()

# Convenience aliases
BASE_FONT_SIZE = TYPOGRAPHY.BASE_FONT_SIZE
LINE_HEIGHT_RATIO = TYPOGRAPHY.LINE_HEIGHT_RATIO

# Separators used when joining rendered fields
ROLE_SEPARATOR = " — "
META_SEPARATOR = " • "
RANGE_SEPARATOR = " – "
SKILL_SEPARATOR = " · "
BULLET_GLYPH = "•"


# =============================================================================
# Preview Scaling
# =============================================================================


@dataclass(frozen=True)
class PreviewConfig:
    """Settings for fitting native-size pages into the viewing width."""

    MIN_SCALE: float = 0.5
    MAX_SCALE: float = 1.0
    FIXED_MARGIN: int = 8
    COMPACT_THRESHOLD: float = 0.8
    COMPACT_GAP: int = 12
    DEFAULT_GAP: int = 16


PREVIEW = PreviewConfig()


# =============================================================================
# Storage
# =============================================================================


@dataclass(frozen=True)
class StorageConfig:
    """Persistence and document format settings."""

    STORAGE_KEY: str = "pp-resume-v1"
    AUTOSAVE_DELAY: float = 0.5  # seconds
    EXPORT_FILENAME: str = "resume-data.json"
    DOCUMENT_VERSION: int = 1


STORAGE = StorageConfig()

# Convenience aliases
STORAGE_KEY = STORAGE.STORAGE_KEY
AUTOSAVE_DELAY = STORAGE.AUTOSAVE_DELAY
DOCUMENT_VERSION = STORAGE.DOCUMENT_VERSION
