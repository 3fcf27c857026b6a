"""
StudentRepository — domain-facing facade over StudentStore.

Callers speak in students (get_all_students / insert / update / delete) and
never see SQL or the storage technology behind the store.
"""

import logging
from typing import Union

from student_manager.exceptions import InvalidRecordError
from student_manager.live import Subscription
from student_manager.store.db import StudentStore
from student_manager.store.models import AGE_MAX, AGE_MIN, StudentRecord

__all__ = ["StudentRepository", "validate_record"]

logger = logging.getLogger(__name__)

_STR_FIELDS = ("name", "email", "reg_number", "course")


def validate_record(record: object) -> StudentRecord:
    """
    Check that *record* is a well-formed StudentRecord and return it.

    Raises:
        InvalidRecordError: wrong type, non-string text field, non-int age,
                            an age outside the 32-bit range, or a negative id.
    """
    if not isinstance(record, StudentRecord):
        raise InvalidRecordError(f"Expected StudentRecord, got {type(record).__name__}")
    for name in _STR_FIELDS:
        if not isinstance(getattr(record, name), str):
            raise InvalidRecordError(f"StudentRecord.{name} must be a string")
    # bool is an int subclass but never a valid age or id
    if not isinstance(record.age, int) or isinstance(record.age, bool):
        raise InvalidRecordError("StudentRecord.age must be an integer")
    if not AGE_MIN <= record.age <= AGE_MAX:
        raise InvalidRecordError(f"StudentRecord.age out of range: {record.age}")
    if record.id is not None and (
        not isinstance(record.id, int) or isinstance(record.id, bool) or record.id < 0
    ):
        raise InvalidRecordError(f"StudentRecord.id must be a non-negative integer, got {record.id!r}")
    return record


class StudentRepository:
    """Pass-through to an explicitly supplied StudentStore."""

    def __init__(self, store: StudentStore) -> None:
        self._store = store

    @property
    def store(self) -> StudentStore:
        return self._store

    def get_all_students(self) -> Subscription[list[StudentRecord]]:
        """Live snapshots of every student, newest first."""
        return self._store.observe_all()

    def insert(self, record: StudentRecord) -> int:
        """Insert (or replace by id) and return the stored id."""
        return self._store.insert(validate_record(record))

    def update(self, record: StudentRecord) -> bool:
        """Overwrite an existing student. False means the id was not found."""
        validate_record(record)
        if record.is_new:
            logger.warning("Update of %s ignored: record has no id", record)
            return False
        return self._store.update(record)

    def delete(self, record: Union[StudentRecord, int]) -> bool:
        """Delete a student given as a record or a bare id. False means the id was not found."""
        if isinstance(record, StudentRecord):
            return self._store.delete(validate_record(record))
        if not isinstance(record, int) or isinstance(record, bool) or record < 0:
            raise InvalidRecordError(f"Student id must be a non-negative integer, got {record!r}")
        return self._store.delete(record)
