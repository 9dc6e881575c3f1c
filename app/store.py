from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Optional

from PySide6.QtCore import QObject, Signal

from modules.layout.span_table import BlockSpan


@dataclass(frozen=True)
class EditorState:
    """UI-facing state of the line grid. Replaced wholesale, never mutated."""
    anchor_row: int = 0
    anchor_span: Optional[BlockSpan] = None
    caret: int = 0
    toolbar_visible: bool = False
    generation: int = 0


# Pure setters: each returns a new state and leaves its input untouched.

def with_anchor(state: EditorState, row: int, span: Optional[BlockSpan] = None) -> EditorState:
    return replace(state, anchor_row=int(row), anchor_span=span)


def with_caret(state: EditorState, caret: int) -> EditorState:
    return replace(state, caret=max(0, int(caret)))


def with_toolbar_visible(state: EditorState, visible: bool) -> EditorState:
    return replace(state, toolbar_visible=bool(visible))


def with_generation(state: EditorState, generation: int) -> EditorState:
    return replace(state, generation=int(generation))


class EditorStore(QObject):
    """Single owner of :class:`EditorState`.

    Event handlers compute what changed and hand a setter to
    :meth:`dispatch`; nothing else writes the state.
    """

    state_changed = Signal(object)

    def __init__(self, state: Optional[EditorState] = None, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._state = state or EditorState()

    @property
    def state(self) -> EditorState:
        return self._state

    def dispatch(self, setter: Callable[..., EditorState], *args, **kwargs) -> EditorState:
        new_state = setter(self._state, *args, **kwargs)
        if new_state != self._state:
            self._state = new_state
            self.state_changed.emit(new_state)
        return self._state


__all__ = [
    "EditorState",
    "EditorStore",
    "with_anchor",
    "with_caret",
    "with_toolbar_visible",
    "with_generation",
]
