import pytest

from modules.layout.span_table import build_span_table
from schemas.block import Block, BlockKind, BlockKindTag
from schemas.chart import ChartConfig
from schemas.document import Document


def test_text_block_lengths():
    blk = Block.text("hello")

    assert blk.text_length == 5
    assert blk.document_length == 6
    assert blk.has_separator
    assert blk.metadata["text"] == "hello"


def test_embed_block_is_one_unit():
    blk = Block(kind=BlockKind.chart(), document_length=40, text_length=3)

    assert blk.document_length == 1
    assert blk.text_length == 0
    assert not blk.has_separator


def test_block_constructor_validation():
    with pytest.raises(ValueError):
        Block.text("x", BlockKind.image())
    with pytest.raises(ValueError):
        Block.embed(BlockKind.paragraph())
    with pytest.raises(ValueError):
        Block(kind=BlockKind.paragraph(), document_length=2, text_length=5)
    with pytest.raises(ValueError):
        BlockKind.header(5)
    with pytest.raises(ValueError):
        BlockKind.list_item("checked")


def test_kind_from_format():
    assert BlockKind.from_format(None) == BlockKind.paragraph()
    assert BlockKind.from_format({"header": 2}) == BlockKind.header(2)
    assert BlockKind.from_format({"list": "ordered"}) == BlockKind.list_item("ordered")
    assert BlockKind.from_format({"list": "checked"}).tag is BlockKindTag.UNKNOWN
    assert BlockKind.from_format({"header": "big"}).tag is BlockKindTag.UNKNOWN
    assert BlockKind.from_format({"chart": {}, "header": 1}) == BlockKind.chart()
    assert BlockKind.from_format({"image": "a.png"}).is_embed


def test_document_length_counts_embed_separator():
    doc = Document([Block.text("abc"), Block.embed(BlockKind.chart()), Block.text("de")])

    assert doc.positional_length() == 8
    assert doc.embed_count == 1
    assert doc.document_length() == 9
    assert [doc.block_start(i) for i in range(4)] == [0, 4, 5, 8]


def test_block_index_at():
    doc = Document([Block.text("abc"), Block.embed(BlockKind.image()), Block.text("de")])

    assert doc.block_index_at(0) == 0
    assert doc.block_index_at(3) == 0
    assert doc.block_index_at(4) == 1
    assert doc.block_index_at(5) == 2
    assert doc.block_index_at(50) == 2
    assert Document().block_index_at(0) == -1


def test_block_start_out_of_range():
    with pytest.raises(IndexError):
        Document([Block.text("a")]).block_start(3)


def test_merge_rejects_embeds():
    doc = Document([Block.text("a"), Block.embed(BlockKind.chart())])

    with pytest.raises(ValueError):
        doc.merge_text_blocks(0)


def test_document_from_dict_fills_lengths():
    doc = Document.from_dict({
        "blocks": [
            {"kind": {"tag": "header", "level": 1}, "metadata": {"text": "Title"}},
            {"kind": {"tag": "chart"}, "metadata": {"config": {"height": 120}}},
            {"kind": {"tag": "callout"}, "metadata": {"text": "note"}},
        ]
    })

    assert [b.document_length for b in doc.blocks] == [6, 1, 5]
    assert doc.blocks[0].kind == BlockKind.header(1)
    assert doc.blocks[2].kind.tag is BlockKindTag.UNKNOWN


def test_document_dict_round_trip_keeps_measurements():
    doc = Document([Block.text("a"), Block.embed(BlockKind.image(), {"src": "x.png"}, measured_height=64)])

    restored = Document.from_dict(doc.to_dict())

    assert restored.blocks[1].measured_height == 64
    assert restored.blocks[1].metadata["config"] == {"src": "x.png"}
    assert restored.document_length() == doc.document_length()


def test_chart_config_accepts_renderer_field_names():
    config = ChartConfig.from_dict({"xField": "month", "yField": "sales", "type": "interval", "color": "red"})

    assert config.x_field == "month"
    assert config.y_field == "sales"
    assert config.height == 300
    with pytest.raises(ValueError):
        ChartConfig(type="pie")


def test_kind_from_dict_falls_back_to_unknown():
    assert BlockKind.from_dict({"tag": "header", "level": 5}).tag is BlockKindTag.UNKNOWN
    assert BlockKind.from_dict({"tag": "header", "level": "big"}).tag is BlockKindTag.UNKNOWN
    assert BlockKind.from_dict({"tag": "list_item", "list_style": "checked"}).tag is BlockKindTag.UNKNOWN
    assert BlockKind.from_dict({"tag": "header", "level": 2}) == BlockKind.header(2)


def test_document_from_dict_keeps_invalid_kinds_as_single_rows():
    doc = Document.from_dict({
        "blocks": [
            {"kind": {"tag": "header", "level": 5}, "metadata": {"text": "Deep"}},
            {"kind": {"tag": "paragraph"}, "metadata": {"text": "body"}},
        ]
    })

    assert doc.blocks[0].kind.tag is BlockKindTag.UNKNOWN
    assert doc.blocks[0].document_length == 5
    assert build_span_table(doc, 30).total_rows == 2
