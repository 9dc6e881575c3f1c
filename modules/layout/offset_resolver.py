import bisect
import logging
from dataclasses import dataclass, field
from typing import NamedTuple, Optional, Protocol

from PySide6.QtCore import QPointF

from config.settings import GridSettings, settings as default_settings
from modules.utils.exceptions import UnsupportedTextDirectionError

from .coordinates import GridCoordinates
from .embeds import choose_boundary
from .span_table import BlockSpan

logger = logging.getLogger(__name__)

# Tops closer than this belong to the same visual row.
ROW_TOP_TOLERANCE = 0.5


class CharacterBounds(NamedTuple):
    left: float
    top: float
    height: float


class TextLayoutProvider(Protocol):
    """What the renderer reports about laid-out text."""

    def character_bounds_at(self, offset: int) -> CharacterBounds:
        ...

    def line_text_at(self, block_index: int) -> int:
        """Content length of a text block, excluding its line separator."""
        ...


@dataclass
class VisualRow:
    """Caret offsets of one rendered row of a text block, left to right."""
    offsets: list[int] = field(default_factory=list)
    lefts: list[float] = field(default_factory=list)
    top: float = 0.0
    height: float = 0.0

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def distance_to(self, y: float) -> float:
        if y < self.top:
            return self.top - y
        if y > self.bottom:
            return y - self.bottom
        return 0.0

    def midpoints(self) -> list[float]:
        return [(a + b) / 2 for a, b in zip(self.lefts[:-1], self.lefts[1:])]


class HorizontalOffsetResolver:
    """Finds the caret offset nearest to a horizontal pixel inside a block."""

    def __init__(self, layout_provider: TextLayoutProvider, settings: Optional[GridSettings] = None):
        self.layout_provider = layout_provider
        self.settings = settings or default_settings
        self.coords = GridCoordinates(self.settings)

    def text_length(self, span: BlockSpan) -> int:
        length = self.layout_provider.line_text_at(span.block_index)
        return max(0, min(int(length), span.block.document_length))

    def row_start_offset(self, span: BlockSpan) -> int:
        return span.start_offset

    def row_end_offset(self, span: BlockSpan) -> int:
        """Last caret position in a text block (before its separator)."""
        return span.start_offset + self.text_length(span)

    def visual_rows(self, span: BlockSpan) -> list[VisualRow]:
        """Group a text block's caret offsets into rendered rows by their top."""
        rows: list[VisualRow] = []
        start = span.start_offset
        for offset in range(start, start + self.text_length(span) + 1):
            bounds = self.layout_provider.character_bounds_at(offset)
            if not rows or abs(bounds.top - rows[-1].top) > ROW_TOP_TOLERANCE:
                rows.append(VisualRow(top=bounds.top, height=bounds.height))
            row = rows[-1]
            row.offsets.append(offset)
            row.lefts.append(bounds.left)
            row.height = max(row.height, bounds.height)
        return rows

    def _pick_row(self, rows: list[VisualRow], span: BlockSpan, row_offset: int) -> VisualRow:
        grid_row = span.start_row + max(0, min(row_offset, span.row_span - 1))
        y = self.coords.row_center(grid_row)
        # First row wins ties so the pick is stable.
        return min(rows, key=lambda r: r.distance_to(y))

    def resolve_in_row(self, row: VisualRow, pixel_x: float, block_index: Optional[int] = None) -> int:
        lefts = row.lefts
        if any(b < a for a, b in zip(lefts[:-1], lefts[1:])):
            raise UnsupportedTextDirectionError(
                f"Glyph edges of row at y={row.top} are not left-to-right", block_index=block_index
            )
        idx = bisect.bisect_left(row.midpoints(), pixel_x)
        return row.offsets[idx]

    def resolve_offset(self, span: BlockSpan, row_offset: int, pixel_x: float) -> int:
        """Return the document offset for ``pixel_x`` on a row of ``span``.

        Embeds always answer with one of their two boundary offsets. Text
        rows are searched over the midpoints between consecutive left edges,
        so a pixel exactly on a midpoint resolves to the earlier offset.
        """
        if span.block.is_embed:
            grid_row = span.start_row + max(0, min(row_offset, span.row_span - 1))
            rect = self.coords.span_rect(span)
            return choose_boundary(span, rect, QPointF(pixel_x, self.coords.row_center(grid_row)))

        if self.text_length(span) == 0:
            return span.start_offset

        rows = self.visual_rows(span)
        row = self._pick_row(rows, span, row_offset)
        return self.resolve_in_row(row, pixel_x, span.block_index)
