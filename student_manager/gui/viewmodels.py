"""
GUI ViewModels — pure-Python observable state containers.

No Qt imports here; every class is testable without a display.
Qt widgets subscribe to the live streams exposed here (through
SnapshotWorker) and call the command methods in response to user actions.

Public API
──────────
parse_age             — lenient age parser for the student form
StudentFormState      — raw text of the add/update form
StudentListViewModel  — search term + filtered live student list + commands
"""

import logging
import re
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

from student_manager.exceptions import InvalidRecordError
from student_manager.live import LiveStream, Subscription, combine_latest
from student_manager.query import filter_students
from student_manager.repository import StudentRepository
from student_manager.store.models import AGE_MAX, AGE_MIN, StudentRecord

__all__ = [
    "parse_age",
    "StudentFormState",
    "StudentListViewModel",
]

logger = logging.getLogger(__name__)

_WHOLE_NUMBER = re.compile(r"[+-]?[0-9]+")


def parse_age(text: str) -> int:
    """Parse the age field; anything that is not a whole 32-bit number becomes 0."""
    if not isinstance(text, str):
        return 0
    text = text.strip()
    if not _WHOLE_NUMBER.fullmatch(text):
        return 0
    value = int(text)
    return value if AGE_MIN <= value <= AGE_MAX else 0


def _require_name(name: str) -> None:
    if not name or not name.strip():
        raise InvalidRecordError("Student name must not be blank")


# ── StudentFormState ───────────────────────────────────────────────────────────

@dataclass
class StudentFormState:
    """
    Raw field values of the add/update dialog, exactly as typed.

    The confirm button is enabled only while can_submit is True.
    """
    name:       str = ""
    email:      str = ""
    reg_number: str = ""
    age_text:   str = ""
    course:     str = ""

    @classmethod
    def from_record(cls, record: StudentRecord) -> "StudentFormState":
        return cls(
            name=record.name,
            email=record.email,
            reg_number=record.reg_number,
            age_text=str(record.age),
            course=record.course,
        )

    @property
    def can_submit(self) -> bool:
        return bool(self.name.strip())

    @property
    def age(self) -> int:
        return parse_age(self.age_text)

    def apply_to(self, record: StudentRecord) -> StudentRecord:
        """Return *record* with every editable field replaced by the form values."""
        return record.copy_with(
            name=self.name,
            email=self.email,
            reg_number=self.reg_number,
            age=self.age,
            course=self.course,
        )


# ── StudentListViewModel ───────────────────────────────────────────────────────

class StudentListViewModel:
    """
    State behind the student list screen.

    Attributes
    ──────────
    search_query — LiveStream[str] holding the current search term ("" initially)
    students     — derived stream: latest store snapshot filtered by search_query

    Mutation commands hand the write to a single background worker and
    return a Future immediately; the list updates when the store publishes
    the resulting snapshot.  A failed write is logged and re-raised from
    Future.result().
    """

    def __init__(
        self,
        repository: StudentRepository,
        executor: Optional[ThreadPoolExecutor] = None,
    ) -> None:
        self._repo = repository
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="student-writes"
        )
        self.search_query: LiveStream[str] = LiveStream("", name="search_query")
        self.students = combine_latest(
            repository.get_all_students(),
            self.search_query,
            filter_students,
            name="visible_students",
        )

    # ── Queries ────────────────────────────────────────────────────────────

    @property
    def search_term(self) -> str:
        return self.search_query.value

    @property
    def visible_students(self) -> list[StudentRecord]:
        """The most recently computed filtered list ([] before the first one)."""
        try:
            return list(self.students.value)
        except LookupError:
            return []

    def subscribe(self) -> Subscription[list[StudentRecord]]:
        """Live filtered lists; the latest one is pending immediately if computed."""
        return self.students.subscribe()

    # ── Commands ───────────────────────────────────────────────────────────

    def on_search_query_change(self, term: str) -> None:
        self.search_query.publish(term)

    def clear_search(self) -> None:
        self.search_query.publish("")

    def add_student(self, name: str, email: str, reg_number: str,
                    age: int, course: str) -> Future:
        """Queue an insert of a new student (the store assigns the id)."""
        _require_name(name)
        record = StudentRecord(
            name=name, email=email, reg_number=reg_number, age=age, course=course,
        )
        return self._submit("insert", self._repo.insert, record)

    def update_student(self, record: StudentRecord) -> Future:
        """Queue an overwrite of *record*; Future resolves False if its id vanished."""
        _require_name(record.name)
        return self._submit("update", self._repo.update, record)

    def delete_student(self, record: StudentRecord) -> Future:
        """Queue a delete of *record*; Future resolves False if it was already gone."""
        return self._submit("delete", self._repo.delete, record)

    def close(self) -> None:
        """Finish queued writes and stop the derived stream."""
        if self._owns_executor:
            self._executor.shutdown(wait=True)
        self.students.close()
        self.search_query.close()

    # ── Internal helpers ───────────────────────────────────────────────────

    def _submit(self, action: str, fn, record: StudentRecord) -> Future:
        logger.debug("Queueing %s of %s", action, record)
        future = self._executor.submit(fn, record)

        def _report(done: Future) -> None:
            exc = done.exception()
            if exc is not None:
                logger.error("Student %s failed for %s: %s", action, record, exc)
            elif done.result() is False:
                logger.warning("Student %s had no effect: id=%s not found", action, record.id)

        future.add_done_callback(_report)
        return future
