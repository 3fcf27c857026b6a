"""
StudentStore — SQLite-backed persistence layer for student records.

Usage::

    store = StudentStore(db_path="~/.student-manager/students.db")

    # Subscribe before or after writing; the current snapshot is replayed
    sub = store.observe_all()
    sub.get()                          # -> [] on a fresh database

    new_id = store.insert(StudentRecord(name="Ann", course="CS"))
    sub.get(timeout=1)                 # -> [StudentRecord(id=new_id, ...)]

    store.update(record.copy_with(course="Math"))
    store.delete(record)
    sub.cancel()
"""

import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

from student_manager.exceptions import StorageError, StreamClosedError
from student_manager.live import LiveStream, Subscription
from student_manager.store.models import StudentRecord

__all__ = ["StudentStore", "DEFAULT_TIMEOUT"]

logger = logging.getLogger(__name__)

# Path to the SQL schema file bundled with this package
_SCHEMA_PATH = Path(__file__).parent / "migrations" / "schema.sql"

# Seconds to wait on a locked database before giving up
DEFAULT_TIMEOUT = 5.0

_SELECT_ALL = "SELECT * FROM students ORDER BY id DESC"


class StudentStore:
    """
    CRUD interface for the local SQLite student table plus a live snapshot stream.

    Writes are serialised by a lock.  The post-write snapshot is read inside
    the same transaction and published while the lock is still held, so every
    emitted snapshot is a complete committed state and snapshots are emitted
    in write order.  Each operation opens its own short-lived connection.
    """

    def __init__(self, db_path: str, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._db_path = Path(db_path).expanduser()
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"Cannot create {self._db_path.parent}: {exc}") from exc
        self._timeout = timeout
        self._write_lock = threading.Lock()
        self._snapshots: LiveStream[list[StudentRecord]] = LiveStream(name="students")
        self._ensure_schema()
        with self._connect() as conn:
            self._snapshots.publish(self._select_all(conn))
        logger.info("Opened student store at %s", self._db_path)

    # ── Internal helpers ──────────────────────────────────────────────────

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection inside a transaction; driver errors become StorageError."""
        try:
            conn = sqlite3.connect(str(self._db_path), timeout=self._timeout)
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot open database {self._db_path}: {exc}") from exc
        conn.row_factory = sqlite3.Row
        try:
            with conn:
                yield conn
        except (sqlite3.Error, OverflowError) as exc:
            raise StorageError(f"Database operation failed: {exc}") from exc
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        """Create tables if they don't already exist."""
        sql = _SCHEMA_PATH.read_text(encoding="utf-8")
        with self._connect() as conn:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.executescript(sql)

    def _check_open(self) -> None:
        if self._snapshots.closed:
            raise StorageError(f"Student store {self._db_path} is closed")

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> StudentRecord:
        return StudentRecord(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            reg_number=row["reg_number"],
            age=row["age"],
            course=row["course"],
        )

    def _select_all(self, conn: sqlite3.Connection) -> list[StudentRecord]:
        return [self._row_to_record(r) for r in conn.execute(_SELECT_ALL).fetchall()]

    @staticmethod
    def _values(record: StudentRecord) -> tuple:
        return (record.name, record.email, record.reg_number, record.age, record.course)

    # ── Public API ────────────────────────────────────────────────────────

    def insert(self, record: StudentRecord) -> int:
        """
        Persist *record*.

        A record with id 0/None gets a fresh id (ids are never reused).  A
        record carrying an explicit id replaces whatever row has that id.

        Returns:
            The id of the stored row.
        """
        with self._write_lock:
            self._check_open()
            with self._connect() as conn:
                cur = conn.execute(
                    """
                    INSERT OR REPLACE INTO students
                        (id, name, email, reg_number, age, course)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (record.id or None, *self._values(record)),
                )
                row_id = cur.lastrowid
                snapshot = self._select_all(conn)
            self._snapshots.publish(snapshot)
        logger.debug("Inserted student id=%s name=%r", row_id, record.name)
        return row_id  # type: ignore[return-value]

    def update(self, record: StudentRecord) -> bool:
        """
        Overwrite every field of the row whose id matches *record.id*.

        Returns:
            True if a row was updated, False if the id does not exist
            (nothing is written and no snapshot is emitted).
        """
        with self._write_lock:
            self._check_open()
            with self._connect() as conn:
                cur = conn.execute(
                    """
                    UPDATE students
                       SET name=?, email=?, reg_number=?, age=?, course=?
                     WHERE id=?
                    """,
                    (*self._values(record), record.id),
                )
                if cur.rowcount == 0:
                    logger.debug("Update skipped: no student with id=%s", record.id)
                    return False
                snapshot = self._select_all(conn)
            self._snapshots.publish(snapshot)
        logger.debug("Updated student id=%s", record.id)
        return True

    def delete(self, record: Union[StudentRecord, int]) -> bool:
        """
        Delete the row identified by *record* (a StudentRecord or a bare id).

        Returns:
            True if a row was deleted, False if id not found.
        """
        record_id = record.id if isinstance(record, StudentRecord) else record
        with self._write_lock:
            self._check_open()
            with self._connect() as conn:
                cur = conn.execute("DELETE FROM students WHERE id=?", (record_id,))
                if cur.rowcount == 0:
                    logger.debug("Delete skipped: no student with id=%s", record_id)
                    return False
                snapshot = self._select_all(conn)
            self._snapshots.publish(snapshot)
        logger.debug("Deleted student id=%s", record_id)
        return True

    def get(self, record_id: int) -> Optional[StudentRecord]:
        """
        Retrieve a single student by id.

        Returns:
            StudentRecord if found, None otherwise.
        """
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM students WHERE id=?", (record_id,)
            ).fetchone()
        return self._row_to_record(row) if row else None

    def get_all(self) -> list[StudentRecord]:
        """One-shot read of every student, newest id first."""
        with self._connect() as conn:
            return self._select_all(conn)

    def count(self) -> int:
        with self._connect() as conn:
            return conn.execute("SELECT COUNT(*) FROM students").fetchone()[0]

    def observe_all(self) -> Subscription[list[StudentRecord]]:
        """
        Subscribe to full snapshots of the table (newest id first).

        The current snapshot is pending immediately; a new one follows every
        write that changes the table.  The subscription stays open until the
        caller cancels it or the store is closed.
        """
        try:
            return self._snapshots.subscribe()
        except StreamClosedError as exc:
            raise StorageError(f"Student store {self._db_path} is closed") from exc

    def close(self) -> None:
        """Close the snapshot stream; every open subscription ends."""
        with self._write_lock:
            self._snapshots.close()
        logger.info("Closed student store at %s", self._db_path)
