from PySide6.QtCore import QPointF, QRectF

from modules.layout.embeds import (
    ChartEmbedMeasurer,
    boundary_offsets,
    choose_boundary,
    is_atomic,
    is_inside_embed,
)
from modules.layout.span_table import BlockSpan, build_span_table
from schemas.block import Block, BlockKind
from schemas.document import Document


def _embed_span(start_offset=3, row_span=3):
    return BlockSpan(
        block=Block.embed(BlockKind.chart()),
        block_index=1,
        start_row=1,
        row_span=row_span,
        start_offset=start_offset,
    )


def test_insert_between_blocks_shifts_by_one():
    doc = Document([Block.text("abcd"), Block.text("efgh")])
    assert doc.document_length() == 10

    insertion = doc.insert_embed(5, BlockKind.chart(), {"height": 90})

    assert insertion.block_index == 1
    assert insertion.caret == 6
    assert not insertion.split
    assert doc.document_length() == 12
    assert doc.block_start(2) == 6
    assert doc.blocks[2].metadata["text"] == "efgh"


def test_insert_inside_text_splits_block():
    doc = Document([Block.text("abcdefghi")])

    insertion = doc.insert_embed(5, BlockKind.image())

    assert insertion.split
    assert insertion.block_index == 1
    left, embed, right = doc.blocks
    assert (left.metadata["text"], left.text_length, left.document_length) == ("abcde", 5, 5)
    assert not left.has_separator
    assert embed.is_embed
    assert (right.metadata["text"], right.text_length, right.document_length) == ("fghi", 4, 5)
    assert doc.block_start(2) == 6
    assert doc.document_length() == 12


def test_insert_clamps_offset():
    doc = Document([Block.text("ab")])

    insertion = doc.insert_embed(99, BlockKind.chart())

    assert insertion.offset == 3
    assert insertion.caret == 4
    assert doc.blocks[-1].is_embed


def test_insert_into_empty_document():
    doc = Document()

    insertion = doc.insert_embed(0, BlockKind.chart())

    assert insertion == (0, 0, 1, False)
    assert doc.document_length() == 2


def test_merge_restores_split_block():
    doc = Document([Block.text("abcdefghi")])
    insertion = doc.insert_embed(5, BlockKind.image())

    doc.remove_block(insertion.block_index)
    doc.merge_text_blocks(insertion.block_index - 1)

    assert len(doc) == 1
    assert doc.blocks[0].metadata["text"] == "abcdefghi"
    assert doc.blocks[0].document_length == 10


def test_boundary_offsets():
    span = _embed_span(start_offset=7)

    assert is_atomic(span)
    assert boundary_offsets(span) == (7, 8)
    assert not is_inside_embed(span, 7)
    assert not is_inside_embed(span, 8)


def test_choose_boundary_multi_row_uses_vertical_midpoint():
    span = _embed_span()
    rect = QRectF(0, 30, 800, 90)

    assert choose_boundary(span, rect, QPointF(700, 40)) == 3
    assert choose_boundary(span, rect, QPointF(10, 110)) == 4
    assert choose_boundary(span, rect, QPointF(10, 75)) == 3
    assert choose_boundary(span, rect, QPointF(400, 75)) == 4


def test_choose_boundary_single_row_uses_horizontal_midpoint():
    span = _embed_span(row_span=1)
    rect = QRectF(0, 30, 200, 30)

    assert choose_boundary(span, rect, QPointF(99, 59)) == 3
    assert choose_boundary(span, rect, QPointF(101, 31)) == 4


def test_chart_measurer():
    measurer = ChartEmbedMeasurer()

    assert measurer.measure_embed(Block.embed(BlockKind.chart(), {"height": 120})) == 120.0
    assert measurer.measure_embed(Block.embed(BlockKind.chart())) == 300.0
    assert measurer.measure_embed(Block.embed(BlockKind.chart(), {"type": "pie"})) is None
    assert measurer.measure_embed(Block.embed(BlockKind.image(), {"src": "a.png"})) is None


def test_default_chart_spans_ten_rows():
    doc = Document([Block.embed(BlockKind.chart())])

    assert build_span_table(doc, 30, ChartEmbedMeasurer())[0].row_span == 10
