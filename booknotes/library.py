from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Generic, List, Optional, TypeVar

from booknotes.book import BookNote
from booknotes.config import settings
from booknotes.database import connection, initialize_database
from booknotes.sorting import SortMode

logger = logging.getLogger(__name__)

T = TypeVar("T")

_COLUMNS = "id, title, author, notes, rating, date_read"

# sqlite3.Error from the store, OverflowError for ids SQLite cannot bind,
# ValueError for rows whose date_read is not an ISO date.
_STORE_FAILURES = (sqlite3.Error, OverflowError, ValueError)


class StoreError(Exception):
    """Any failure reading from or writing to the notes store."""
    pass


class DuplicateEntry(StoreError):
    """A note with the same title and author already exists."""
    pass


@dataclass
class StoreResult(Generic[T]):
    """Outcome of a store call: either a value or the error that prevented it.

    Callers that want the page to keep rendering pick a fallback explicitly
    with ``unwrap_or``.
    """
    value: Optional[T] = None
    error: Optional[StoreError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap_or(self, default: T) -> T:
        return self.value if self.error is None else default


class Library:
    """Reads and writes book notes in the SQLite store."""

    def __init__(self, db_file: Optional[str] = None) -> None:
        self.db_file = db_file or settings.database_file
        initialize_database(self.db_file)

    # ------------------------- Queries ------------------------- #
    def list_notes(self, sort: SortMode = SortMode.DATE_NEW) -> StoreResult[List[BookNote]]:
        """All notes in the requested order."""
        try:
            with connection(self.db_file) as conn:
                # order_by only ever yields one of the fixed SortMode clauses
                rows = conn.execute(f"SELECT {_COLUMNS} FROM books ORDER BY {sort.order_by}").fetchall()
            return StoreResult([BookNote.from_dict(dict(row)) for row in rows])
        except _STORE_FAILURES as e:
            return self._failed("list_notes", e)

    def top_rated(self) -> StoreResult[Optional[BookNote]]:
        """Highest rated note, the most recently read one winning ties."""
        try:
            with connection(self.db_file) as conn:
                row = conn.execute(
                    f"SELECT {_COLUMNS} FROM books ORDER BY rating DESC, date_read DESC LIMIT 1"
                ).fetchone()
            return StoreResult(BookNote.from_dict(dict(row)) if row else None)
        except _STORE_FAILURES as e:
            return self._failed("top_rated", e)

    def find_note(self, note_id: int) -> StoreResult[Optional[BookNote]]:
        """A single note by id; the value is None when there is no such note."""
        try:
            with connection(self.db_file) as conn:
                row = conn.execute(f"SELECT {_COLUMNS} FROM books WHERE id = ?", (note_id,)).fetchone()
            return StoreResult(BookNote.from_dict(dict(row)) if row else None)
        except _STORE_FAILURES as e:
            return self._failed("find_note", e)

    def count(self) -> StoreResult[int]:
        try:
            with connection(self.db_file) as conn:
                return StoreResult(conn.execute("SELECT COUNT(*) FROM books").fetchone()[0])
        except _STORE_FAILURES as e:
            return self._failed("count", e)

    def get_statistics(self) -> StoreResult[Dict[str, Any]]:
        try:
            with connection(self.db_file) as conn:
                row = conn.execute(
                    "SELECT COUNT(*), COUNT(DISTINCT author), AVG(rating) FROM books"
                ).fetchone()
        except _STORE_FAILURES as e:
            return self._failed("get_statistics", e)

        average = round(row[2], 2) if row[2] is not None else None
        return StoreResult({
            "total_notes": row[0],
            "unique_authors": row[1],
            "average_rating": average,
        })

    # ------------------------- Mutations ------------------------- #
    def add_note(self, title: str, author: str, notes: Optional[str], rating: int, date_read: date) -> int:
        """Insert a note and return its id.

        Raises DuplicateEntry when the title/author pair is already stored and
        StoreError for anything else the store refuses.
        """
        try:
            with connection(self.db_file) as conn:
                cursor = conn.execute(
                    "INSERT INTO books (title, author, notes, rating, date_read) VALUES (?, ?, ?, ?, ?)",
                    (title, author, notes, rating, date_read.isoformat()),
                )
                conn.commit()
                new_id = cursor.lastrowid
        except sqlite3.IntegrityError as e:
            if "UNIQUE" in str(e):
                logger.warning(f"Duplicate note rejected: {title} by {author}")
                raise DuplicateEntry(f"{title} by {author} already exists.") from e
            logger.error(f"Error in add_note(): {e}")
            raise StoreError(str(e)) from e
        except sqlite3.Error as e:
            logger.error(f"Error in add_note(): {e}")
            raise StoreError(str(e)) from e

        logger.info(f"Added note {new_id}: {title} by {author}")
        return new_id

    def update_note(self, note_id: int, rating: int, notes: Optional[str]) -> StoreResult[bool]:
        """Change rating and notes. Range checks belong to the caller."""
        try:
            with connection(self.db_file) as conn:
                cursor = conn.execute(
                    "UPDATE books SET rating = ?, notes = ? WHERE id = ?",
                    (rating, notes, note_id),
                )
                conn.commit()
                changed = cursor.rowcount > 0
        except _STORE_FAILURES as e:
            return self._failed("update_note", e)

        if changed:
            logger.info(f"Updated note {note_id}")
        return StoreResult(changed)

    def delete_note(self, note_id: int) -> StoreResult[bool]:
        """Remove a note; a missing id is not an error."""
        try:
            with connection(self.db_file) as conn:
                cursor = conn.execute("DELETE FROM books WHERE id = ?", (note_id,))
                conn.commit()
                changed = cursor.rowcount > 0
        except _STORE_FAILURES as e:
            return self._failed("delete_note", e)

        if changed:
            logger.info(f"Deleted note {note_id}")
        return StoreResult(changed)

    # ------------------------- Utilities ------------------------- #
    @staticmethod
    def _failed(operation: str, exc: Exception) -> StoreResult[Any]:
        logger.error(f"Error in {operation}(): {exc}")
        return StoreResult(error=StoreError(str(exc)))
