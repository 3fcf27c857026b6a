"""
Application host for the student manager.

Usage
─────
  # Open the default database (~/.student-manager/students.db)
  python -m student_manager

  # Use another database file, verbose logging
  python -m student_manager --db ./students.db --debug

  # STUDENT_MANAGER_DB overrides the default --db value
  STUDENT_MANAGER_DB=/tmp/students.db student-manager

main() builds the object graph explicitly (store → repository → view model
→ window), runs the Qt event loop and tears everything down afterwards.
"""

import argparse
import logging
import os
import sys
from typing import Optional

from student_manager.exceptions import StorageError
from student_manager.gui.viewmodels import StudentListViewModel
from student_manager.repository import StudentRepository
from student_manager.store.db import DEFAULT_TIMEOUT, StudentStore

__all__ = ["build_parser", "build_view_model", "main", "DEFAULT_DB_PATH", "DB_ENV_VAR"]

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = "~/.student-manager/students.db"
DB_ENV_VAR = "STUDENT_MANAGER_DB"


def build_parser() -> argparse.ArgumentParser:
    """Build and return the launcher's argument parser."""
    parser = argparse.ArgumentParser(
        prog="student-manager",
        description="Manage student records in a local SQLite database",
    )
    parser.add_argument(
        "--db",
        default=os.environ.get(DB_ENV_VAR, DEFAULT_DB_PATH),
        metavar="PATH",
        help=f"SQLite database path (default: ${DB_ENV_VAR} or {DEFAULT_DB_PATH})",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        metavar="SECONDS",
        help=f"Seconds to wait on a locked database (default: {DEFAULT_TIMEOUT})",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Enable verbose debug logging",
    )
    return parser


def build_view_model(store: StudentStore) -> StudentListViewModel:
    """Wire a repository and view model around an already-open *store*."""
    return StudentListViewModel(StudentRepository(store))


def main(argv: Optional[list[str]] = None) -> int:
    """Launch the GUI. Returns the process exit code."""
    ns = build_parser().parse_args(argv)

    level = logging.DEBUG if ns.debug else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")

    try:
        store = StudentStore(db_path=ns.db, timeout=ns.timeout)
    except StorageError as exc:
        logger.debug("opening store failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    view_model = build_view_model(store)

    from PyQt6.QtWidgets import QApplication
    from student_manager.gui.main_window import MainWindow

    app = QApplication.instance() or QApplication(sys.argv[:1])
    window = MainWindow(view_model)
    window.show()
    try:
        return app.exec()
    finally:
        window.shutdown()
        view_model.close()
        store.close()


if __name__ == "__main__":
    raise SystemExit(main())
