from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QPointF

from config.settings import GridSettings, settings as default_settings
from modules.utils.exceptions import UnsupportedTextDirectionError
from schemas.document import Document

from .coordinates import GridCoordinates
from .embeds import boundary_offsets, choose_boundary
from .offset_resolver import HorizontalOffsetResolver, TextLayoutProvider
from .snapshot import LayoutSnapshot
from .span_table import BlockSpan

logger = logging.getLogger(__name__)


class CaretMapper:
    """Converts pointer coordinates into document offsets.

    The mapper only computes candidate offsets; committing one as the caret
    is left to the caller.
    """

    def __init__(
            self,
            snapshot: LayoutSnapshot,
            document: Document,
            layout_provider: TextLayoutProvider,
            settings: Optional[GridSettings] = None,
        ):
        self.snapshot = snapshot
        self.document = document
        self.settings = settings or default_settings
        self.coords = GridCoordinates(self.settings)
        self.resolver = HorizontalOffsetResolver(layout_provider, self.settings)

    def end_offset(self, span: BlockSpan) -> int:
        """Caret position at the very end of a block."""
        if span.block.is_embed:
            return boundary_offsets(span)[1]
        return self.resolver.row_end_offset(span)

    def _clamp(self, offset: int) -> int:
        return max(0, min(int(offset), self.document.document_length()))

    def resolve_point(self, point: QPointF) -> int:
        return self.resolve(point.x(), point.y())

    def resolve(self, x: float, y: float) -> int:
        if self.snapshot.is_empty:
            # Touch the snapshot so a retired one still raises.
            self.snapshot.find_block_at_row(0)
            logger.debug("Empty document, caret resolves to 0")
            return 0

        hit = self.snapshot.find_block_at_row(self.coords.row_at(y))
        span = self.snapshot.span(hit.block_index)

        if hit.below_content:
            return self._clamp(self.end_offset(span))

        if span.block.is_embed:
            rect = self.coords.span_rect(span)
            return self._clamp(choose_boundary(span, rect, QPointF(x, y)))

        try:
            offset = self.resolver.resolve_offset(span, hit.row_offset, x)
        except UnsupportedTextDirectionError as e:
            logger.warning("Falling back to row start for block %s: %s", e.block_index, e)
            offset = self.resolver.row_start_offset(span)
        return self._clamp(offset)
