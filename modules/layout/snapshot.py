from __future__ import annotations

import itertools
import logging
from typing import Optional

from config.settings import GridSettings, settings as default_settings
from modules.utils.exceptions import StaleLayoutError
from schemas.document import Document

from .row_index import RowHit, RowIndex
from .span_table import BlockSpan, BlockSpanTable, EmbedMeasurer, build_span_table

logger = logging.getLogger(__name__)

_generations = itertools.count(1)


class LayoutSnapshot:
    """A span table and its row index, valid until the next rebuild.

    Readers hold on to a snapshot for the duration of one lookup. Once the
    owner swaps in a newer snapshot it retires this one, and any further
    query raises :class:`StaleLayoutError`.
    """

    def __init__(self, table: BlockSpanTable, settings: GridSettings, generation: Optional[int] = None):
        self.table = table
        self.settings = settings
        self.row_index = RowIndex(table, settings.linear_scan_threshold)
        self.generation = generation if generation is not None else next(_generations)
        self._retired = False

    @classmethod
    def build(cls, document: Document, settings: Optional[GridSettings] = None,
              measurer: Optional[EmbedMeasurer] = None) -> "LayoutSnapshot":
        settings = settings or default_settings
        table = build_span_table(document, settings.line_height_px, measurer)
        return cls(table, settings)

    @property
    def retired(self) -> bool:
        return self._retired

    def retire(self) -> None:
        self._retired = True

    def _check_live(self) -> None:
        if self._retired:
            raise StaleLayoutError(self.generation)

    @property
    def is_empty(self) -> bool:
        return len(self.table) == 0

    @property
    def total_rows(self) -> int:
        return self.row_index.total_rows

    def find_block_at_row(self, row: int) -> RowHit:
        self._check_live()
        return self.row_index.find_block_at_row(row)

    def span(self, block_index: int) -> BlockSpan:
        self._check_live()
        return self.table[block_index]

    def last_span(self) -> Optional[BlockSpan]:
        self._check_live()
        return self.table[len(self.table) - 1] if len(self.table) else None
