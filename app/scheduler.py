from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from PySide6.QtCore import QObject, QTimer

logger = logging.getLogger(__name__)


class DeferredTask(QObject):
    """A callback run once on a later event loop pass unless cancelled first."""

    def __init__(self, callback: Callable[[], None], delay_ms: int = 0, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._callback = callback
        self._cancelled = False
        self._has_run = False

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(max(0, int(delay_ms)))
        self._timer.timeout.connect(self._run)

    def start(self) -> "DeferredTask":
        if not self._cancelled and not self._has_run:
            self._timer.start()
        return self

    def cancel(self) -> None:
        self._timer.stop()
        self._cancelled = True

    @property
    def is_pending(self) -> bool:
        return self._timer.isActive()

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    @property
    def has_run(self) -> bool:
        return self._has_run

    def _run(self):
        if self._cancelled or self._has_run:
            return
        self._has_run = True
        self._callback()


class GestureScheduler(QObject):
    """Holds at most one pending task per gesture.

    Scheduling for a gesture cancels whatever was still pending for it.
    """

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._tasks: Dict[str, DeferredTask] = {}

    def schedule(self, gesture: str, callback: Callable[[], None], delay_ms: int = 0) -> DeferredTask:
        self.cancel(gesture)

        def run_and_forget():
            if self._tasks.get(gesture) is task:
                del self._tasks[gesture]
            callback()

        task = DeferredTask(run_and_forget, delay_ms)
        self._tasks[gesture] = task
        return task.start()

    def pending(self, gesture: str) -> Optional[DeferredTask]:
        task = self._tasks.get(gesture)
        if task is not None and task.is_pending:
            return task
        return None

    def cancel(self, gesture: str) -> bool:
        task = self._tasks.pop(gesture, None)
        if task is None:
            return False
        was_pending = task.is_pending
        task.cancel()
        if was_pending:
            logger.debug("Cancelled pending task for gesture %r", gesture)
        return was_pending

    def cancel_all(self) -> None:
        for gesture in list(self._tasks):
            self.cancel(gesture)
