"""
Grid Coordinates

Converts between surface pixel positions and grid rows. This class is
stateless apart from the settings it reads.
"""

import math
from typing import Optional

from PySide6.QtCore import QRectF

from config.settings import GridSettings, settings as default_settings

from .span_table import BlockSpan


class GridCoordinates:
    """Pixel <-> grid row conversions for the line grid."""

    def __init__(self, settings: Optional[GridSettings] = None):
        self.settings = settings or default_settings

    @property
    def line_height(self) -> float:
        return float(self.settings.line_height_px)

    def row_at(self, y: float) -> int:
        """Grid row containing pixel ``y``. Points above the surface map to row 0."""
        if y <= 0:
            return 0
        return int(math.floor(y / self.line_height))

    def row_top(self, row: int) -> float:
        return row * self.line_height

    def row_center(self, row: int) -> float:
        return (row + 0.5) * self.line_height

    def row_rect(self, row: int, width: Optional[float] = None) -> QRectF:
        width = self.settings.surface_width_px if width is None else width
        return QRectF(0, self.row_top(row), width, self.line_height)

    def span_rect(self, span: BlockSpan, width: Optional[float] = None) -> QRectF:
        """Pixel rectangle covered by a block span."""
        if width is None:
            width = span.block.measured_width or self.settings.surface_width_px
        return QRectF(0, self.row_top(span.start_row), width, span.row_span * self.line_height)

    def guide_rows(self, total_rows: int) -> int:
        """Number of alignment guide bands to draw for a document of ``total_rows``."""
        return max(int(total_rows), self.settings.guide_row_minimum)

    def guide_rects(self, total_rows: int, width: Optional[float] = None) -> list[QRectF]:
        return [self.row_rect(row, width) for row in range(self.guide_rows(total_rows))]
