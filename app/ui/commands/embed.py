from typing import Optional

from PySide6.QtGui import QUndoCommand

from schemas.block import BlockKind


class InsertEmbedCommand(QUndoCommand):
    def __init__(self, controller, offset: int, kind: BlockKind, config: Optional[dict] = None,
                 measured_height: Optional[float] = None):
        super().__init__(f"Insert {kind.tag.value}")
        self.controller = controller
        self.offset = offset
        self.kind = kind
        self.config = dict(config or {})
        self.measured_height = measured_height
        self.insertion = None

    def redo(self):
        self.insertion = self.controller.insert_embed(
            self.offset, self.kind, self.config, measured_height=self.measured_height
        )

    def undo(self):
        if self.insertion is None:
            return
        document = self.controller.document
        index = self.insertion.block_index
        removed = document.remove_block(index)
        # Keep the measured size so a redo lays out at the same height.
        if removed.measured_height is not None:
            self.measured_height = removed.measured_height
        if self.insertion.split:
            document.merge_text_blocks(index - 1)
        self.controller.rebuild()
        self.controller.commit_caret(self.insertion.offset)
        self.insertion = None
