"""
store — SQLite-backed persistence layer for student records.

Public API
──────────
StudentRecord — frozen dataclass representing one student row
StudentStore  — CRUD interface plus the live snapshot stream (observe_all)
"""

from student_manager.store.models import StudentRecord
from student_manager.store.db import StudentStore

__all__ = ["StudentRecord", "StudentStore"]
