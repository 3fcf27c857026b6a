"""
StudentListPage — the single screen of the student manager.

Shows the filtered student list produced by StudentListViewModel and turns
button clicks into view-model commands.

Layout
──────
  ┌─────────────────────────────────────────────────┐
  │ STUDENTS                                        │
  │ Search: [_____________________________________] │
  │ ┌─────────────────────────────────────────────┐ │
  │ │ Name │ Course │ Reg No │ Email       │ Age  │ │
  │ │ Ann  │ CS     │ R1     │ ann@uni.edu │ 20   │ │
  │ │ …    │ …      │ …      │ …           │ …    │ │
  │ └─────────────────────────────────────────────┘ │
  │                      [Add] [Edit] [Delete]      │
  └─────────────────────────────────────────────────┘

"No students found" replaces the table while the visible list is empty.
"""

from concurrent.futures import Future
from typing import Optional

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import (
    QDialog,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from student_manager.gui.pages.student_form import StudentDialog
from student_manager.gui.viewmodels import StudentListViewModel
from student_manager.store.models import StudentRecord

__all__ = ["StudentListPage"]

# Column indices
_COL_NAME   = 0
_COL_COURSE = 1
_COL_REG    = 2
_COL_EMAIL  = 3
_COL_AGE    = 4
_HEADERS = ["Name", "Course", "Reg No", "Email", "Age"]


class StudentListPage(QWidget):
    """
    Search box, student table and the add / edit / delete actions.

    Signals
      • write_failed(str) — a queued insert/update/delete raised; emitted from
                            the writer thread, delivered queued to receivers
    """

    write_failed = pyqtSignal(str)

    def __init__(self, view_model: StudentListViewModel, parent: QWidget = None) -> None:
        super().__init__(parent)
        self._vm = view_model
        self._records: list[StudentRecord] = []
        self._build_ui()
        self.show_students(self._vm.visible_students)

    # ── UI construction ────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(10)

        # Title
        layout.addWidget(QLabel("<b>STUDENTS</b>"))

        # Search bar
        search_row = QHBoxLayout()
        search_row.addWidget(QLabel("Search:"))
        self._search_edit = QLineEdit()
        self._search_edit.setPlaceholderText("Search students…")
        self._search_edit.setClearButtonEnabled(True)
        self._search_edit.textChanged.connect(self._on_search_changed)
        search_row.addWidget(self._search_edit)
        layout.addLayout(search_row)

        # Empty-state placeholder
        self._empty_label = QLabel("No students found")
        layout.addWidget(self._empty_label)

        # Student table
        self._table = QTableWidget(0, len(_HEADERS))
        self._table.setHorizontalHeaderLabels(_HEADERS)
        self._table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        self._table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
        self._table.setSelectionMode(QTableWidget.SelectionMode.SingleSelection)
        self._table.horizontalHeader().setStretchLastSection(True)
        self._table.doubleClicked.connect(self._on_edit_clicked)
        layout.addWidget(self._table)

        # Bottom button row
        btn_row = QHBoxLayout()
        btn_row.addStretch()
        self._add_btn    = QPushButton("Add")
        self._edit_btn   = QPushButton("Edit")
        self._delete_btn = QPushButton("Delete")
        self._add_btn.clicked.connect(self._on_add_clicked)
        self._edit_btn.clicked.connect(self._on_edit_clicked)
        self._delete_btn.clicked.connect(self._on_delete_clicked)
        btn_row.addWidget(self._add_btn)
        btn_row.addWidget(self._edit_btn)
        btn_row.addWidget(self._delete_btn)
        layout.addLayout(btn_row)

    # ── Slots ──────────────────────────────────────────────────────────────

    def _on_search_changed(self, text: str) -> None:
        self._vm.on_search_query_change(text)

    def _on_add_clicked(self, *_args) -> None:
        dialog = StudentDialog(parent=self)
        if dialog.exec() != QDialog.DialogCode.Accepted:
            return
        state = dialog.form_state()
        self._track(self._vm.add_student(
            state.name, state.email, state.reg_number, state.age, state.course,
        ))

    def _on_edit_clicked(self, *_args) -> None:
        record = self.selected_student()
        if record is None:
            return
        dialog = StudentDialog(record=record, parent=self)
        if dialog.exec() != QDialog.DialogCode.Accepted:
            return
        self._track(self._vm.update_student(dialog.edited_record()))

    def _on_delete_clicked(self, *_args) -> None:
        record = self.selected_student()
        if record is None:
            return
        self._track(self._vm.delete_student(record))

    def _track(self, future: Future) -> None:
        def _done(done: Future) -> None:
            exc = done.exception()
            if exc is not None:
                self.write_failed.emit(str(exc))

        future.add_done_callback(_done)

    # ── Public API ─────────────────────────────────────────────────────────

    def show_students(self, records: list) -> None:
        """Replace the table contents with *records* (list[StudentRecord])."""
        self._records = list(records)
        self._table.setRowCount(len(self._records))
        for row, rec in enumerate(self._records):
            self._table.setItem(row, _COL_NAME,   QTableWidgetItem(rec.name))
            self._table.setItem(row, _COL_COURSE, QTableWidgetItem(rec.course))
            self._table.setItem(row, _COL_REG,    QTableWidgetItem(rec.reg_number))
            self._table.setItem(row, _COL_EMAIL,  QTableWidgetItem(rec.email))
            self._table.setItem(row, _COL_AGE,    QTableWidgetItem(str(rec.age)))
        empty = not self._records
        self._empty_label.setVisible(empty)
        self._table.setVisible(not empty)

    def selected_student(self) -> Optional[StudentRecord]:
        row = self._table.currentRow()
        if 0 <= row < len(self._records):
            return self._records[row]
        return None
