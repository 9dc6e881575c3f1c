"""Alignment anchor: the grid row the insertion control lines up with."""

from __future__ import annotations

import math
from typing import Optional

from config.settings import GridSettings, settings as default_settings
from schemas.block import BlockKindTag

from .span_table import BlockSpan

# Rows below the span start that headers centre on.
HEADER_ANCHOR_ROWS = {1: 2, 2: 1}


def compute_anchor(span: Optional[BlockSpan], line_height_px: float = 30,
                   affordance_height_px: float = 24) -> int:
    """Return the anchor row for ``span``; row 0 when there is no span.

    Level 1 and 2 headers anchor on a fixed row inside their span. Every
    other kind centres the control on its first row: half a row down, minus
    half the control's own height, floored to a whole row.
    """
    if span is None:
        return 0

    kind = span.kind
    if kind.tag is BlockKindTag.HEADER and kind.level in HEADER_ANCHOR_ROWS:
        return span.start_row + HEADER_ANCHOR_ROWS[kind.level]

    center_px = span.start_row * line_height_px + line_height_px / 2
    row = int(math.floor((center_px - affordance_height_px / 2) / line_height_px))
    return max(0, row)


def compute_anchor_for(span: Optional[BlockSpan], settings: Optional[GridSettings] = None) -> int:
    settings = settings or default_settings
    return compute_anchor(span, settings.line_height_px, settings.anchor_affordance_height_px)


__all__ = ["compute_anchor", "compute_anchor_for", "HEADER_ANCHOR_ROWS"]
