"""
Row Index

Cumulative start rows over a block span table, used to map a grid row
back to the block that covers it.
"""

from __future__ import annotations

import logging
from typing import NamedTuple

import numpy as np

from .span_table import BlockSpan, BlockSpanTable

logger = logging.getLogger(__name__)


class RowHit(NamedTuple):
    block_index: int
    row_offset: int
    below_content: bool = False

    @property
    def is_document_start(self) -> bool:
        return self.block_index < 0


# Returned for an empty table: nothing to hit, the caret belongs at offset 0.
DOCUMENT_START = RowHit(block_index=-1, row_offset=0)


class RowIndex:
    """Maps grid rows to blocks over a fixed span table."""

    def __init__(self, table: BlockSpanTable, linear_scan_threshold: int = 16):
        self.table = table
        self.linear_scan_threshold = linear_scan_threshold

        row_spans = table.row_spans
        ends = np.cumsum(row_spans) if len(row_spans) else np.zeros(0, dtype=np.int64)
        self.start_rows = np.concatenate(([0], ends[:-1])).astype(np.int64) if len(ends) else ends
        self.total_rows = int(ends[-1]) if len(ends) else 0
        self.start_rows.setflags(write=False)

    def __len__(self) -> int:
        return len(self.table)

    def _last_start_at_or_before(self, row: int) -> int:
        if len(self.start_rows) <= self.linear_scan_threshold:
            idx = 0
            for i, start in enumerate(self.start_rows):
                if start > row:
                    break
                idx = i
            return idx
        return int(np.searchsorted(self.start_rows, row, side='right')) - 1

    def find_block_at_row(self, row: int) -> RowHit:
        """Return the block covering ``row`` and the row offset inside it.

        Rows past the last block resolve to the last block with the offset
        clamped to its final row.
        """
        if not len(self.table):
            return DOCUMENT_START

        row = max(0, int(row))
        if row >= self.total_rows:
            last = self.table[len(self.table) - 1]
            logger.debug("Row %d is below content (%d rows), clamping to block %d",
                         row, self.total_rows, last.block_index)
            return RowHit(last.block_index, last.row_span - 1, below_content=True)

        idx = self._last_start_at_or_before(row)
        span = self.table[idx]
        return RowHit(idx, row - span.start_row)

    def span_at_row(self, row: int) -> BlockSpan | None:
        hit = self.find_block_at_row(row)
        if hit.is_document_start:
            return None
        return self.table[hit.block_index]


__all__ = ["RowIndex", "RowHit", "DOCUMENT_START"]
