"""
query — pure search filter over student snapshots.

filter_students(snapshot, term) is what the student list shows for a given
search box value.  It performs no I/O and keeps no state, so the view model
can re-run it on every change of either input.
"""

from typing import Iterable

from student_manager.store.models import StudentRecord

__all__ = ["matches", "filter_students"]


def matches(record: StudentRecord, term: str) -> bool:
    """True iff *term* is a case-insensitive substring of name, course or reg number."""
    needle = term.casefold()
    return (
        needle in record.name.casefold()
        or needle in record.course.casefold()
        or needle in record.reg_number.casefold()
    )


def filter_students(snapshot: Iterable[StudentRecord], term: str) -> list[StudentRecord]:
    """
    Return the records of *snapshot* that match *term*, in their original order.

    A blank (empty or whitespace-only) term matches everything.  A non-blank
    term is matched as typed, surrounding whitespace included.
    """
    if not term or not term.strip():
        return list(snapshot)
    return [r for r in snapshot if matches(r, term)]
