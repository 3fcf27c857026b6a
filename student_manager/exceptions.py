"""
Project-wide custom exception hierarchy.
All modules raise subclasses of StudentManagerError — never bare Exception.
"""

__all__ = [
    "StudentManagerError",
    "StorageError",
    "InvalidRecordError",
    "StreamClosedError",
]


class StudentManagerError(Exception):
    """Root exception for all student-manager errors."""


# ── Store ─────────────────────────────────────────────────────────────────────

class StorageError(StudentManagerError):
    """Raised on SQLite I/O errors, lock timeouts, or a failed snapshot load."""


# ── Repository ────────────────────────────────────────────────────────────────

class InvalidRecordError(StudentManagerError, ValueError):
    """Raised when a mutation is handed something that is not a well-formed StudentRecord."""


# ── Live streams ──────────────────────────────────────────────────────────────

class StreamClosedError(StudentManagerError):
    """Raised when reading from a cancelled subscription or a closed stream."""
