import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from config.settings import GridSettings
from modules.layout.embeds import ChartEmbedMeasurer
from modules.layout.offset_resolver import CharacterBounds


class ReversedTextLayout:
    """Reports glyph edges right to left, as unreordered RTL text would."""

    def __init__(self, document):
        self.document = document

    def line_text_at(self, block_index):
        return self.document.blocks[block_index].text_length

    def character_bounds_at(self, offset):
        return CharacterBounds(left=1000.0 - offset * 10, top=0.0, height=30.0)


@pytest.fixture
def grid_settings():
    return GridSettings(
        line_height_px=30,
        anchor_affordance_height_px=24,
        surface_width_px=800.0,
        linear_scan_threshold=16,
        caret_placement_delay_ms=0,
    )


@pytest.fixture
def measurer():
    return ChartEmbedMeasurer()


@pytest.fixture
def reversed_layout():
    return ReversedTextLayout
