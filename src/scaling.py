#!/usr/bin/env python3
"""
Preview scaling.

Computes the single scale factor applied to every page so native-size pages
fit the available viewing width. Pagination always runs at native size.
"""

import math
from dataclasses import dataclass

from config import PREVIEW


@dataclass(frozen=True)
class PreviewLayout:
    """How the page stack is presented."""

    scale: float = 1.0
    gap: int = PREVIEW.DEFAULT_GAP


def compute_scale(native_page_width: float, available_width: float) -> float:
    """Clamp min(available - margin, native) / native to [0.5, 1.0]."""
    if not math.isfinite(native_page_width) or native_page_width <= 0:
        return PREVIEW.MAX_SCALE
    if math.isnan(available_width):
        return PREVIEW.MIN_SCALE

    target = min(available_width - PREVIEW.FIXED_MARGIN, native_page_width)
    scale = target / native_page_width
    return max(PREVIEW.MIN_SCALE, min(PREVIEW.MAX_SCALE, scale))


def stack_gap(scale: float) -> int:
    """Tighter spacing between pages when they are shrunk a lot."""
    return PREVIEW.COMPACT_GAP if scale < PREVIEW.COMPACT_THRESHOLD else PREVIEW.DEFAULT_GAP


def layout_preview(native_page_width: float, available_width: float) -> PreviewLayout:
    scale = compute_scale(native_page_width, available_width)
    return PreviewLayout(scale=scale, gap=stack_gap(scale))
