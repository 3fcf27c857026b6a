"""
Unit tests for student_manager/gui/ Qt widgets — requires PyQt6 + offscreen display.

Run with: QT_QPA_PLATFORM=offscreen pytest tests/unit/test_gui_widgets.py

Coverage plan
─────────────
StudentDialog      → 4 tests
StudentListPage    → 5 tests
SnapshotWorker     → 2 tests
MainWindow         → 3 tests
─────────────────────────────────
Total              = 14 tests
"""

import os

import pytest

# Ensure offscreen rendering when no display is available
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

PyQt6 = pytest.importorskip("PyQt6", reason="PyQt6 not installed")


# ─────────────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture
def store(tmp_path):
    from student_manager.store.db import StudentStore
    s = StudentStore(db_path=str(tmp_path / "gui.db"))
    yield s
    s.close()


@pytest.fixture
def vm(store):
    from student_manager.app import build_view_model
    model = build_view_model(store)
    yield model
    model.close()


def _records():
    from student_manager.store.models import StudentRecord
    return [
        StudentRecord(id=2, name="Bob", course="Math", reg_number="R2", age=21),
        StudentRecord(id=1, name="Ann", course="CS", reg_number="R1", age=20),
    ]


# ─────────────────────────────────────────────────────────────────────────────
# 1. StudentDialog
# ─────────────────────────────────────────────────────────────────────────────

class TestStudentDialog:

    def test_add_dialog_title_and_save_button(self, qtbot):
        from student_manager.gui.pages.student_form import StudentDialog
        dialog = StudentDialog()
        qtbot.addWidget(dialog)
        assert dialog.windowTitle() == "Add Student"
        assert dialog._confirm_btn.text() == "Save"

    def test_confirm_disabled_until_name_entered(self, qtbot):
        from student_manager.gui.pages.student_form import StudentDialog
        dialog = StudentDialog()
        qtbot.addWidget(dialog)
        assert not dialog._confirm_btn.isEnabled()
        dialog._name_edit.setText("Ann")
        assert dialog._confirm_btn.isEnabled()
        dialog._name_edit.setText("   ")
        assert not dialog._confirm_btn.isEnabled()

    def test_form_state_parses_age_leniently(self, qtbot):
        from student_manager.gui.pages.student_form import StudentDialog
        dialog = StudentDialog()
        qtbot.addWidget(dialog)
        dialog._name_edit.setText("Ann")
        dialog._age_edit.setText("old")
        assert dialog.form_state().age == 0

    def test_update_dialog_prefills_and_keeps_id(self, qtbot):
        from student_manager.gui.pages.student_form import StudentDialog
        record = _records()[1]
        dialog = StudentDialog(record=record)
        qtbot.addWidget(dialog)
        assert dialog.windowTitle() == "Update Student"
        assert dialog._confirm_btn.text() == "Update"
        assert dialog._name_edit.text() == "Ann"
        dialog._course_edit.setText("Law")
        edited = dialog.edited_record()
        assert edited.id == 1
        assert edited.course == "Law"


# ─────────────────────────────────────────────────────────────────────────────
# 2. StudentListPage
# ─────────────────────────────────────────────────────────────────────────────

class TestStudentListPage:

    def test_has_table_and_action_buttons(self, qtbot, vm):
        from student_manager.gui.pages.student_list import StudentListPage
        from PyQt6.QtWidgets import QPushButton, QTableWidget
        page = StudentListPage(vm)
        qtbot.addWidget(page)
        assert len(page.findChildren(QTableWidget)) == 1
        labels = [b.text().lower() for b in page.findChildren(QPushButton)]
        assert {"add", "edit", "delete"} <= set(labels)

    def test_show_students_fills_table(self, qtbot, vm):
        from student_manager.gui.pages.student_list import StudentListPage
        page = StudentListPage(vm)
        qtbot.addWidget(page)
        page.show_students(_records())
        assert page._table.rowCount() == 2
        assert page._table.item(0, 0).text() == "Bob"
        assert page._table.item(1, 2).text() == "R1"

    def test_empty_list_shows_placeholder(self, qtbot, vm):
        from student_manager.gui.pages.student_list import StudentListPage
        page = StudentListPage(vm)
        qtbot.addWidget(page)
        page.show()
        page.show_students([])
        assert page._empty_label.isVisible()
        assert not page._table.isVisible()
        page.show_students(_records())
        assert not page._empty_label.isVisible()

    def test_search_edit_updates_view_model(self, qtbot, vm):
        from student_manager.gui.pages.student_list import StudentListPage
        page = StudentListPage(vm)
        qtbot.addWidget(page)
        page._search_edit.setText("math")
        assert vm.search_term == "math"

    def test_delete_button_deletes_selected_student(self, qtbot, vm, store):
        from student_manager.gui.pages.student_list import StudentListPage
        from student_manager.store.models import StudentRecord
        new_id = store.insert(StudentRecord(name="Ann", course="CS"))
        page = StudentListPage(vm)
        qtbot.addWidget(page)
        page.show_students(store.get_all())
        page._table.setCurrentCell(0, 0)
        assert page.selected_student().id == new_id
        page._delete_btn.click()
        qtbot.waitUntil(lambda: store.count() == 0, timeout=2000)


# ─────────────────────────────────────────────────────────────────────────────
# 3. SnapshotWorker
# ─────────────────────────────────────────────────────────────────────────────

class TestSnapshotWorker:

    def test_run_emits_each_value_until_stopped(self):
        from student_manager.gui.worker import SnapshotWorker
        from student_manager.live import LiveStream
        stream = LiveStream([1])
        worker = SnapshotWorker(stream.subscribe())
        received = []
        worker.snapshot_received.connect(received.append)
        # Stop once the first value has been emitted so run() returns
        worker.snapshot_received.connect(lambda _v: worker.stop())
        worker.run()
        assert received == [[1]]

    def test_run_emits_finished_when_stream_closes(self):
        from student_manager.gui.worker import SnapshotWorker
        from student_manager.live import LiveStream
        stream = LiveStream()
        worker = SnapshotWorker(stream.subscribe())
        done = []
        worker.finished.connect(lambda: done.append(True))
        stream.close()
        worker.run()
        assert done == [True]


# ─────────────────────────────────────────────────────────────────────────────
# 4. MainWindow
# ─────────────────────────────────────────────────────────────────────────────

class TestMainWindow:

    def test_creates_and_shuts_down(self, qtbot, vm):
        from student_manager.gui.main_window import MainWindow
        win = MainWindow(vm)
        qtbot.addWidget(win)
        assert win.windowTitle() == "Students"
        win.shutdown()
        assert not win._thread.isRunning()

    def test_store_writes_reach_the_table(self, qtbot, vm, store):
        from student_manager.gui.main_window import MainWindow
        from student_manager.store.models import StudentRecord
        win = MainWindow(vm)
        qtbot.addWidget(win)
        store.insert(StudentRecord(name="Ann", course="CS", reg_number="R1"))
        store.insert(StudentRecord(name="Bob", course="Math", reg_number="R2"))
        qtbot.waitUntil(lambda: win.page._table.rowCount() == 2, timeout=3000)
        assert win.page._table.item(0, 0).text() == "Bob"

        win.page._search_edit.setText("R1")
        qtbot.waitUntil(lambda: win.page._table.rowCount() == 1, timeout=3000)
        assert win.page._table.item(0, 0).text() == "Ann"
        win.shutdown()

    def test_write_failure_shows_in_status_bar(self, qtbot, vm):
        from student_manager.gui.main_window import MainWindow
        win = MainWindow(vm)
        qtbot.addWidget(win)
        win._on_write_failed("database is locked")
        assert "database is locked" in win.statusBar().currentMessage()
        win.shutdown()
