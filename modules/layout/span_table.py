"""Block Span Table: how many grid rows each block of a document occupies."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterator, Optional, Protocol, Sequence

import numpy as np

from schemas.block import Block, BlockKind, BlockKindTag
from schemas.document import Document

logger = logging.getLogger(__name__)

HEADER_ROW_SPANS = {1: 3, 2: 2, 3: 1, 4: 1}


class EmbedMeasurer(Protocol):
    def measure_embed(self, block: Block) -> Optional[float]:
        """Return the rendered pixel height of an embed, or None if unknown."""
        ...


@dataclass(frozen=True)
class BlockSpan:
    """A block together with the range of grid rows it covers."""
    block: Block
    block_index: int
    start_row: int
    row_span: int
    start_offset: int
    measured: bool = True

    @property
    def end_row(self) -> int:
        """First row after this span."""
        return self.start_row + self.row_span

    @property
    def kind(self) -> BlockKind:
        return self.block.kind

    def covers(self, row: int) -> bool:
        return self.start_row <= row < self.end_row


def embed_row_span(measured_height: Optional[float], line_height_px: float) -> int:
    if measured_height is None or measured_height <= 0:
        return 1
    return max(1, math.ceil(measured_height / line_height_px))


def row_span_for(kind: BlockKind, line_height_px: float, measured_height: Optional[float] = None) -> int:
    tag = kind.tag
    if tag is BlockKindTag.HEADER:
        return HEADER_ROW_SPANS.get(kind.level, 1)
    elif tag is BlockKindTag.PARAGRAPH or tag is BlockKindTag.LIST_ITEM:
        return 1
    elif tag is BlockKindTag.CHART_EMBED or tag is BlockKindTag.IMAGE_EMBED:
        return embed_row_span(measured_height, line_height_px)
    else:  # UNKNOWN and anything added later
        return 1


class BlockSpanTable:
    """Immutable, ordered list of block spans tiling the grid without gaps.

    Rebuild it with :func:`build_span_table` after every structural change;
    never edit one in place.
    """

    def __init__(self, spans: Sequence[BlockSpan], line_height_px: float):
        self._spans = tuple(spans)
        self.line_height_px = line_height_px
        self._row_spans = np.fromiter((s.row_span for s in self._spans), dtype=np.int64, count=len(self._spans))
        self._row_spans.setflags(write=False)

    def __len__(self) -> int:
        return len(self._spans)

    def __iter__(self) -> Iterator[BlockSpan]:
        return iter(self._spans)

    def __getitem__(self, index: int) -> BlockSpan:
        return self._spans[index]

    @property
    def spans(self) -> tuple[BlockSpan, ...]:
        return self._spans

    @property
    def row_spans(self) -> np.ndarray:
        return self._row_spans

    @property
    def total_rows(self) -> int:
        return int(self._row_spans.sum()) if len(self._spans) else 0

    @property
    def unmeasured(self) -> list[int]:
        """Indices of embed blocks whose height is still presumed."""
        return [s.block_index for s in self._spans if not s.measured]


def build_span_table(document: Document, line_height_px: float = 30,
                     measurer: Optional[EmbedMeasurer] = None) -> BlockSpanTable:
    """Derive the block span table for ``document``.

    Embed heights come from the block's own measurement first, then from
    ``measurer``. An embed with no known height spans a single row until a
    later rebuild supplies the measurement.
    """
    spans: list[BlockSpan] = []
    start_row = 0
    start_offset = 0

    for i, block in enumerate(document.blocks):
        measured = True
        height = None
        if block.is_embed:
            height = block.measured_height
            if height is None and measurer is not None:
                height = measurer.measure_embed(block)
            if height is None:
                measured = False
                logger.debug("Embed at block %d has no measured height yet, assuming one row", i)

        span = row_span_for(block.kind, line_height_px, height)
        spans.append(BlockSpan(
            block=block,
            block_index=i,
            start_row=start_row,
            row_span=span,
            start_offset=start_offset,
            measured=measured,
        ))
        start_row += span
        start_offset += block.document_length

    table = BlockSpanTable(spans, line_height_px)
    logger.debug("Built span table: %d blocks over %d rows", len(table), table.total_rows)
    return table


__all__ = [
    "BlockSpan",
    "BlockSpanTable",
    "EmbedMeasurer",
    "HEADER_ROW_SPANS",
    "build_span_table",
    "embed_row_span",
    "row_span_for",
]
