from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QObject, Signal

from app.scheduler import DeferredTask, GestureScheduler
from app.store import (
    EditorStore,
    with_anchor,
    with_caret,
    with_generation,
    with_toolbar_visible,
)
from config.settings import GridSettings, settings as default_settings
from modules.layout.anchor import compute_anchor_for
from modules.layout.caret_mapper import CaretMapper
from modules.layout.coordinates import GridCoordinates
from modules.layout.offset_resolver import TextLayoutProvider
from modules.layout.snapshot import LayoutSnapshot
from modules.layout.span_table import BlockSpan, EmbedMeasurer
from schemas.block import BlockKind
from schemas.document import Document, EmbedInsertion

logger = logging.getLogger(__name__)


class LineGridController(QObject):
    """Pointer and mutation entry points of the line grid.

    Owns the current :class:`LayoutSnapshot` and replaces it wholesale on
    every rebuild. Pointer-move anchoring and pointer-down caret placement
    both read whichever snapshot is current when they run.
    """

    anchor_changed = Signal(int)
    caret_committed = Signal(int)
    layout_rebuilt = Signal(int)

    def __init__(
            self,
            document: Document,
            layout_provider: TextLayoutProvider,
            measurer: Optional[EmbedMeasurer] = None,
            settings: Optional[GridSettings] = None,
            store: Optional[EditorStore] = None,
            parent: Optional[QObject] = None,
        ):
        super().__init__(parent)
        self.settings = settings or default_settings
        self.layout_provider = layout_provider
        self.measurer = measurer
        self.store = store or EditorStore(parent=self)
        self.scheduler = GestureScheduler(self)
        self.coords = GridCoordinates(self.settings)

        self.document = document
        self._snapshot: Optional[LayoutSnapshot] = None
        self.rebuild(document)

    @property
    def snapshot(self) -> LayoutSnapshot:
        return self._snapshot

    def mapper(self) -> CaretMapper:
        return CaretMapper(self._snapshot, self.document, self.layout_provider, self.settings)

    # Mutation

    def rebuild(self, document: Optional[Document] = None) -> LayoutSnapshot:
        """Rebuild the layout for ``document`` and swap it in."""
        if document is not None:
            self.document = document

        new_snapshot = LayoutSnapshot.build(self.document, self.settings, self.measurer)
        old_snapshot, self._snapshot = self._snapshot, new_snapshot
        if old_snapshot is not None:
            old_snapshot.retire()

        unmeasured = new_snapshot.table.unmeasured
        if unmeasured:
            logger.debug("Layout %d has unmeasured embeds at blocks %s",
                         new_snapshot.generation, unmeasured)
        logger.debug("Layout %d: %d blocks, %d rows, document length %d",
                     new_snapshot.generation, len(new_snapshot.table),
                     new_snapshot.total_rows, self.document.document_length())

        self.store.dispatch(with_generation, new_snapshot.generation)
        self.layout_rebuilt.emit(new_snapshot.generation)
        return new_snapshot

    def on_embed_measured(self, block_index: int, height: float, width: Optional[float] = None) -> bool:
        """Record a rendered embed's size and rebuild the layout."""
        if not 0 <= block_index < len(self.document.blocks):
            return False
        block = self.document.blocks[block_index]
        if not block.is_embed:
            return False

        block.measured_height = float(height)
        if width is not None:
            block.measured_width = float(width)
        self.rebuild()
        return True

    def insert_embed(self, offset: int, kind: BlockKind, config: Optional[dict] = None,
                     measured_height: Optional[float] = None) -> EmbedInsertion:
        insertion = self.document.insert_embed(offset, kind, config, measured_height=measured_height)
        self.rebuild()
        self.commit_caret(insertion.caret)
        return insertion

    # Pointer

    def span_at(self, y: float) -> Optional[BlockSpan]:
        hit = self._snapshot.find_block_at_row(self.coords.row_at(y))
        if hit.is_document_start:
            return None
        return self._snapshot.span(hit.block_index)

    def on_pointer_move(self, x: float, y: float) -> int:
        span = self.span_at(y)
        anchor = compute_anchor_for(span, self.settings)
        previous = self.store.state.anchor_row
        self.store.dispatch(with_anchor, anchor, span)
        if anchor != previous:
            self.anchor_changed.emit(anchor)
        return anchor

    def resolve_caret(self, x: float, y: float) -> int:
        return self.mapper().resolve(x, y)

    def on_pointer_down(self, x: float, y: float, gesture: str = "primary") -> DeferredTask:
        """Schedule caret placement for a click.

        The offset is resolved when the task fires, against the layout that
        is current then. A newer click on the same gesture cancels it.
        """
        def place():
            self.commit_caret(self.resolve_caret(x, y))

        return self.scheduler.schedule(gesture, place, self.settings.caret_placement_delay_ms)

    def commit_caret(self, offset: int) -> int:
        offset = max(0, min(int(offset), self.document.document_length()))
        self.store.dispatch(with_caret, offset)
        self.caret_committed.emit(offset)
        return offset

    # UI helpers

    def set_toolbar_visible(self, visible: bool) -> None:
        self.store.dispatch(with_toolbar_visible, visible)

    def guide_rows(self) -> int:
        return self.coords.guide_rows(self._snapshot.total_rows)
