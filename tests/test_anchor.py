from config.settings import GridSettings
from modules.layout.anchor import compute_anchor, compute_anchor_for
from modules.layout.span_table import BlockSpan
from schemas.block import Block, BlockKind


def _span(kind, start_row, row_span=1):
    if kind.is_embed:
        block = Block.embed(kind)
    else:
        block = Block.text("text", kind)
    return BlockSpan(block=block, block_index=0, start_row=start_row, row_span=row_span, start_offset=0)


def test_header_anchors():
    assert compute_anchor(_span(BlockKind.header(1), 4, 3)) == 6
    assert compute_anchor(_span(BlockKind.header(2), 4, 2)) == 5
    assert compute_anchor(_span(BlockKind.header(1), 0, 3)) == 2


def test_centred_anchor_for_other_kinds():
    assert compute_anchor(_span(BlockKind.paragraph(), 7)) == 7
    assert compute_anchor(_span(BlockKind.header(3), 0)) == 0
    assert compute_anchor(_span(BlockKind.list_item(), 2)) == 2
    assert compute_anchor(_span(BlockKind.chart(), 5, 4)) == 5


def test_anchor_with_other_line_height():
    assert compute_anchor(_span(BlockKind.paragraph(), 5), line_height_px=20, affordance_height_px=24) == 4


def test_anchor_never_negative():
    assert compute_anchor(_span(BlockKind.paragraph(), 0), affordance_height_px=90) == 0


def test_no_span_anchors_to_first_row():
    assert compute_anchor(None) == 0


def test_anchor_from_settings():
    settings = GridSettings(line_height_px=20, anchor_affordance_height_px=24)

    assert compute_anchor_for(_span(BlockKind.paragraph(), 5), settings) == 4


def test_anchor_is_idempotent():
    kinds = [
        BlockKind.header(1),
        BlockKind.header(2),
        BlockKind.header(4),
        BlockKind.paragraph(),
        BlockKind.list_item("ordered"),
        BlockKind.image(),
    ]
    for kind in kinds:
        for start_row in range(0, 60, 7):
            span = _span(kind, start_row, 3 if kind.is_embed else 1)
            for line_height, affordance in ((30, 24), (20, 24), (18, 40)):
                first = compute_anchor(span, line_height, affordance)
                repeated = [compute_anchor(span, line_height, affordance) for _ in range(5)]
                assert repeated == [first] * 5
                assert first >= 0
