"""
student_manager — local student records with a live, searchable list.

Public API
──────────
StudentRecord        — one student row
StudentStore         — SQLite table + live snapshot stream
StudentRepository    — domain facade over the store
StudentListViewModel — search term + filtered live list + write commands
filter_students      — the pure search filter
"""

from student_manager.store import StudentRecord, StudentStore
from student_manager.repository import StudentRepository
from student_manager.query import filter_students
from student_manager.gui.viewmodels import StudentListViewModel

__version__ = "1.0.0"

__all__ = [
    "StudentRecord",
    "StudentStore",
    "StudentRepository",
    "StudentListViewModel",
    "filter_students",
]
