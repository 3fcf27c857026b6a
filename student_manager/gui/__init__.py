"""
gui — PyQt6 front-end for the student manager.

Public API
──────────
viewmodels            — pure-Python state and commands (no Qt import)
main_window.MainWindow — top-level application window
pages                 — student list page and add/update dialog
worker                — SnapshotWorker bridging live streams to Qt signals
"""

from student_manager.gui import viewmodels

__all__ = ["viewmodels"]
