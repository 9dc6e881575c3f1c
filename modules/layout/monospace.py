"""Fixed-advance text layout, for tooling and tests without a real renderer."""

from __future__ import annotations

from typing import Optional

from config.settings import GridSettings, settings as default_settings
from schemas.document import Document

from .offset_resolver import CharacterBounds
from .span_table import BlockSpanTable, EmbedMeasurer, build_span_table


class MonospaceTextLayout:
    """Lays every character out at a fixed advance from ``left_px``.

    A text block renders on its first grid row. With ``wrap_columns`` set,
    it wraps onto the following rows of its span (never past it).
    """

    def __init__(
            self,
            document: Document,
            settings: Optional[GridSettings] = None,
            measurer: Optional[EmbedMeasurer] = None,
            char_width_px: float = 10.0,
            left_px: float = 0.0,
            wrap_columns: Optional[int] = None,
        ):
        self.document = document
        self.settings = settings or default_settings
        self.measurer = measurer
        self.char_width_px = char_width_px
        self.left_px = left_px
        self.wrap_columns = wrap_columns
        self._table_key = None
        self._table: Optional[BlockSpanTable] = None

    def _current_table(self) -> BlockSpanTable:
        key = tuple((b.kind, b.document_length, b.measured_height) for b in self.document.blocks)
        if key != self._table_key:
            self._table = build_span_table(self.document, self.settings.line_height_px, self.measurer)
            self._table_key = key
        return self._table

    def line_text_at(self, block_index: int) -> int:
        return self.document.blocks[block_index].text_length

    def character_bounds_at(self, offset: int) -> CharacterBounds:
        line_height = self.settings.line_height_px
        table = self._current_table()
        if not len(table):
            return CharacterBounds(self.left_px, 0.0, float(line_height))

        index = self.document.block_index_at(offset)
        span = table[index]
        if index > 0 and offset == span.start_offset:
            previous = table[index - 1]
            # A text fragment without its own separator ends where the next block starts.
            if not previous.block.is_embed and not previous.block.has_separator:
                span = previous
        column = max(0, offset - span.start_offset)
        row = 0
        if self.wrap_columns and not span.block.is_embed:
            row = min(column // self.wrap_columns, span.row_span - 1)
            column -= row * self.wrap_columns

        top = (span.start_row + row) * line_height
        return CharacterBounds(self.left_px + column * self.char_width_px, float(top), float(line_height))
