from PySide6.QtCore import QEvent, QObject, Qt
from PySide6.QtWidgets import QWidget

from app.controllers.line_grid import LineGridController


class PointerEventFilter(QObject):
    """Forwards mouse events on a document surface to the line grid.

    Attach it with ``PointerEventFilter(controller).install(surface)``, which
    also turns on mouse tracking so hover moves reach the filter.
    Events are observed, never consumed, so the surface keeps handling them.
    """

    def __init__(self, controller: LineGridController, parent: QObject = None):
        super().__init__(parent)
        self.controller = controller
        self.last_task = None

    def install(self, surface: QWidget) -> None:
        surface.setMouseTracking(True)
        surface.installEventFilter(self)

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        event_type = event.type()
        if event_type == QEvent.Type.MouseMove:
            self._handle_mouse_move(event)
        elif event_type == QEvent.Type.MouseButtonPress:
            self._handle_mouse_press(event)
        return False

    def _handle_mouse_move(self, event):
        pos = event.position()
        self.controller.on_pointer_move(pos.x(), pos.y())

    def _handle_mouse_press(self, event):
        if event.button() != Qt.MouseButton.LeftButton:
            return
        pos = event.position()
        self.last_task = self.controller.on_pointer_down(pos.x(), pos.y())
