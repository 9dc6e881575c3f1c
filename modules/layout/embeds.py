"""Embed boundary policy: charts and images are atomic in offset space."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QPointF, QRectF

from schemas.block import Block, BlockKindTag
from schemas.chart import ChartConfig

from .span_table import BlockSpan


def is_atomic(span: BlockSpan) -> bool:
    return span.block.is_embed


def boundary_offsets(span: BlockSpan) -> tuple[int, int]:
    """The only two caret positions adjacent to an embed: before and after it."""
    return span.start_offset, span.start_offset + span.block.document_length


def is_inside_embed(span: BlockSpan, offset: int) -> bool:
    before, after = boundary_offsets(span)
    return before < offset < after


def choose_boundary(span: BlockSpan, rect: QRectF, point: QPointF) -> int:
    """Pick the before/after caret for a pointer landing on an embed.

    Embeds spanning several rows are split at their vertical midpoint (top
    half is before); a point exactly on it, or any point on a single-row
    embed, is split at the horizontal midpoint (left half is before).
    """
    before, after = boundary_offsets(span)
    center = rect.center()

    if span.row_span > 1:
        if point.y() < center.y():
            return before
        if point.y() > center.y():
            return after

    return before if point.x() < center.x() else after


class ChartEmbedMeasurer:
    """Reports embed heights known from configuration alone.

    Charts render at their configured height. Images only have a height
    once the renderer has measured them, so they report None here.
    """

    def measure_embed(self, block: Block) -> Optional[float]:
        if block.kind.tag is BlockKindTag.CHART_EMBED:
            try:
                config = ChartConfig.from_dict(block.metadata.get("config"))
            except (TypeError, ValueError):
                return None
            return float(config.height)
        return None


__all__ = ["ChartEmbedMeasurer", "is_atomic", "boundary_offsets", "is_inside_embed", "choose_boundary"]
