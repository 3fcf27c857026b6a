"""
MainWindow — top-level application window for the student manager.

Hosts StudentListPage and owns the background thread that feeds it: a
SnapshotWorker blocks on the view model's filtered subscription and hands
each new list to the page on the GUI thread.
"""

import logging

from PyQt6.QtCore import QThread
from PyQt6.QtWidgets import QMainWindow, QWidget

from student_manager.gui.pages.student_list import StudentListPage
from student_manager.gui.viewmodels import StudentListViewModel
from student_manager.gui.worker import SnapshotWorker

__all__ = ["MainWindow"]

logger = logging.getLogger(__name__)

# Milliseconds a write error stays in the status bar
_STATUS_TIMEOUT_MS = 5000


class MainWindow(QMainWindow):
    """Root window: hosts the student list page and its snapshot thread."""

    def __init__(self, view_model: StudentListViewModel, parent: QWidget = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Students")
        self.resize(720, 480)
        self._vm = view_model

        self._page = StudentListPage(view_model)
        self.setCentralWidget(self._page)
        self._page.write_failed.connect(self._on_write_failed)

        # Worker / thread references — kept to prevent premature GC
        self._thread = QThread()
        self._worker = SnapshotWorker(view_model.subscribe())
        self._worker.moveToThread(self._thread)
        self._thread.started.connect(self._worker.run)
        self._worker.snapshot_received.connect(self._page.show_students)
        self._worker.finished.connect(self._thread.quit)
        self._thread.start()

    # ── Slots ──────────────────────────────────────────────────────────────

    def _on_write_failed(self, error: str) -> None:
        logger.warning("Write failed: %s", error)
        self.statusBar().showMessage(f"Error: {error}", _STATUS_TIMEOUT_MS)

    # ── Public API ─────────────────────────────────────────────────────────

    @property
    def page(self) -> StudentListPage:
        return self._page

    def shutdown(self) -> None:
        """Stop the snapshot thread. Idempotent."""
        self._worker.stop()
        if self._thread.isRunning():
            self._thread.quit()
            self._thread.wait(3000)  # wait up to 3s

    def closeEvent(self, event) -> None:
        self.shutdown()
        super().closeEvent(event)
