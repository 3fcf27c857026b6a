"""
SnapshotWorker — pumps a live student subscription into Qt signals.

Usage (MainWindow)::

    self._thread = QThread()
    self._worker = SnapshotWorker(view_model.subscribe())
    self._worker.moveToThread(self._thread)
    self._thread.started.connect(self._worker.run)
    self._worker.finished.connect(self._thread.quit)
    self._worker.snapshot_received.connect(self._page.show_students)
    self._thread.start()
    ...
    self._worker.stop()        # cancels the subscription; run() returns

Signals
───────
snapshot_received(list) — one filtered list of StudentRecord per change
finished()              — the subscription ended (stopped or stream closed)
"""

import logging

from PyQt6.QtCore import QObject, pyqtSignal

from student_manager.live import Subscription

__all__ = ["SnapshotWorker"]

logger = logging.getLogger(__name__)


class SnapshotWorker(QObject):
    """
    Blocks on a Subscription inside a QThread and re-emits every value.

    Widgets are never touched from run(); the queued signal connection
    delivers each list on the GUI thread.
    """

    snapshot_received = pyqtSignal(list)  # list[StudentRecord]
    finished          = pyqtSignal()

    def __init__(self, subscription: Subscription) -> None:
        super().__init__()
        self._subscription = subscription

    def run(self) -> None:
        """Entry point — connect QThread.started to this slot."""
        for snapshot in self._subscription:
            self.snapshot_received.emit(list(snapshot))
        logger.debug("SnapshotWorker subscription ended")
        self.finished.emit()

    def stop(self) -> None:
        """Cancel the subscription; safe to call from any thread."""
        self._subscription.cancel()
