"""Data models for the store module."""

from dataclasses import dataclass, replace
from typing import Optional

__all__ = ["StudentRecord", "AGE_MIN", "AGE_MAX"]

# Ages are stored as 32-bit signed integers
AGE_MIN = -(2 ** 31)
AGE_MAX = 2 ** 31 - 1


@dataclass(frozen=True)
class StudentRecord:
    """
    One row of the ``students`` table.

    Fields
    ──────
    id          — SQLite row id; 0 (or None) until the store assigns one
    name        — display name, required non-blank by the presentation layer
    email       — free text
    reg_number  — registration number, e.g. "R2024-017"
    age         — whole years; 0 when the user typed something unparsable
    course      — course title, e.g. "Computer Science"

    Records are immutable snapshots; edit flows build a modified copy with
    copy_with() and hand it to StudentRepository.update().
    """
    name:       str
    email:      str           = ""
    reg_number: str           = ""
    age:        int           = 0
    course:     str           = ""
    id:         Optional[int] = 0

    @property
    def is_new(self) -> bool:
        """True iff the store has not assigned an id yet."""
        return not self.id

    def copy_with(self, **changes) -> "StudentRecord":
        """Return a copy of this record with *changes* applied."""
        return replace(self, **changes)

    def __str__(self) -> str:
        return (
            f"StudentRecord(id={self.id}, name={self.name!r}, "
            f"reg={self.reg_number!r}, course={self.course!r})"
        )
