"""
StudentDialog — modal add/update form for one student.

Layout
──────
  ┌──────────────────────────────┐
  │ Add Student                  │
  │ Name:    [_________________] │
  │ Email:   [_________________] │
  │ Reg No:  [_________________] │
  │ Age:     [_________________] │
  │ Course:  [_________________] │
  │             [Cancel] [Save]  │
  └──────────────────────────────┘

The confirm button reads "Update" when editing an existing record and is
disabled while the name is blank.
"""

from typing import Optional

from PyQt6.QtWidgets import (
    QDialog,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from student_manager.gui.viewmodels import StudentFormState
from student_manager.store.models import StudentRecord

__all__ = ["StudentDialog"]


class StudentDialog(QDialog):
    """Collects the five student fields; read the result with form_state()."""

    def __init__(self, record: Optional[StudentRecord] = None,
                 parent: QWidget = None) -> None:
        super().__init__(parent)
        self._record = record
        state = StudentFormState.from_record(record) if record else StudentFormState()
        self.setWindowTitle("Update Student" if record else "Add Student")
        self.setModal(True)
        self._build_ui(state)
        self._sync_confirm()

    # ── UI construction ────────────────────────────────────────────────────

    def _build_ui(self, state: StudentFormState) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.setSpacing(12)

        layout.addWidget(QLabel(f"<b>{self.windowTitle()}</b>"))

        form = QFormLayout()
        self._name_edit   = QLineEdit(state.name)
        self._email_edit  = QLineEdit(state.email)
        self._reg_edit    = QLineEdit(state.reg_number)
        self._age_edit    = QLineEdit(state.age_text)
        self._course_edit = QLineEdit(state.course)
        form.addRow("Name:",   self._name_edit)
        form.addRow("Email:",  self._email_edit)
        form.addRow("Reg No:", self._reg_edit)
        form.addRow("Age:",    self._age_edit)
        form.addRow("Course:", self._course_edit)
        layout.addLayout(form)

        btn_row = QHBoxLayout()
        btn_row.addStretch()
        self._cancel_btn  = QPushButton("Cancel")
        self._confirm_btn = QPushButton("Update" if self._record else "Save")
        self._confirm_btn.setDefault(True)
        btn_row.addWidget(self._cancel_btn)
        btn_row.addWidget(self._confirm_btn)
        layout.addLayout(btn_row)

        self._name_edit.textChanged.connect(self._sync_confirm)
        self._cancel_btn.clicked.connect(self.reject)
        self._confirm_btn.clicked.connect(self.accept)

    # ── Slots ──────────────────────────────────────────────────────────────

    def _sync_confirm(self, *_args) -> None:
        self._confirm_btn.setEnabled(self.form_state().can_submit)

    # ── Public API ─────────────────────────────────────────────────────────

    def form_state(self) -> StudentFormState:
        """Current field values, exactly as typed."""
        return StudentFormState(
            name=self._name_edit.text(),
            email=self._email_edit.text(),
            reg_number=self._reg_edit.text(),
            age_text=self._age_edit.text(),
            course=self._course_edit.text(),
        )

    def edited_record(self) -> StudentRecord:
        """The original record with the form values applied (update flow only)."""
        if self._record is None:
            raise ValueError("edited_record() is only available when editing a student")
        return self.form_state().apply_to(self._record)
