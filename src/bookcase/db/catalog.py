# ABOUTME: CRUD operations for the Bookcase library catalog.
# ABOUTME: Add, query, update, and delete books; batch work runs inside transaction().

import logging
import sqlite3
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Any

from bookcase.db.mapping import FIELDS_BY_COLUMN, BookRecord, row_to_record
from bookcase.isbn import normalize_isbn

logger = logging.getLogger(__name__)


class BookNotFoundError(ValueError):
    """Raised when an operation targets a book id that does not exist."""


def _check_columns(columns: Iterable[str]) -> None:
    unknown = [c for c in columns if c not in FIELDS_BY_COLUMN or c == "id"]
    if unknown:
        raise ValueError(f"Unknown book column(s): {', '.join(sorted(unknown))}")


class LibraryCatalog:
    """Wraps a sqlite3 connection and provides typed CRUD for the books table.

    The connection is expected to be in autocommit mode (see open_library):
    single statements commit on their own, and transaction() groups many
    statements into one all-or-nothing unit.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    @contextmanager
    def transaction(self, *, immediate: bool = False) -> Iterator["LibraryCatalog"]:
        """Run the enclosed statements in one transaction.

        Commits on normal exit and rolls back if the block raises. With
        ``immediate=True`` the write lock is taken up front (BEGIN IMMEDIATE),
        so concurrent writers queue behind this transaction instead of reading
        a snapshot that is about to change.

        Raises:
            RuntimeError: If a transaction is already open on this connection.
        """
        if self._conn.in_transaction:
            raise RuntimeError("A transaction is already open on this connection")

        self._conn.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
        try:
            yield self
        except BaseException:
            self._conn.rollback()
            logger.debug("Transaction rolled back")
            raise
        else:
            self._conn.commit()

    def add_book(self, columns: dict[str, Any]) -> int:
        """Insert a book and return its new row ID.

        Args:
            columns: Column name to value. Columns whose value is None are
                left out of the INSERT so the table defaults apply.

        Raises:
            ValueError: If a column name is not part of the books table.
            sqlite3.IntegrityError: If a NOT NULL column (title, author) is missing.
        """
        row = {k: v for k, v in columns.items() if v is not None}
        _check_columns(row)

        names = ", ".join(row.keys())
        placeholders = ", ".join("?" for _ in row)
        cursor = self._conn.execute(
            f"INSERT INTO books ({names}) VALUES ({placeholders})",
            list(row.values()),
        )
        return cursor.lastrowid  # type: ignore[return-value]

    def get_by_id(self, book_id: int) -> BookRecord | None:
        """Retrieve a book by its row ID."""
        cursor = self._conn.execute("SELECT * FROM books WHERE id = ?", (book_id,))
        row = cursor.fetchone()
        return row_to_record(row) if row else None

    def find_by_normalized_isbn(self, isbn: str) -> BookRecord | None:
        """Find a book whose ISBN equals isbn once hyphens and whitespace are stripped.

        Returns None for an ISBN that is empty after normalization.
        """
        normalized = normalize_isbn(isbn)
        if not normalized:
            return None
        cursor = self._conn.execute(
            "SELECT * FROM books WHERE isbn IS NOT NULL AND normalize_isbn(isbn) = ? "
            "ORDER BY id LIMIT 1",
            (normalized,),
        )
        row = cursor.fetchone()
        return row_to_record(row) if row else None

    def find_by_title_author(self, title: str, author: str) -> BookRecord | None:
        """Find a book with exactly this title and author (case-sensitive)."""
        cursor = self._conn.execute(
            "SELECT * FROM books WHERE title = ? AND author = ? ORDER BY id LIMIT 1",
            (title, author),
        )
        row = cursor.fetchone()
        return row_to_record(row) if row else None

    def list_all(self) -> list[BookRecord]:
        """Return all books in the catalog, ordered by ID."""
        cursor = self._conn.execute("SELECT * FROM books ORDER BY id")
        return [row_to_record(row) for row in cursor.fetchall()]

    def list_by_wishlist(self, wishlist: bool) -> list[BookRecord]:
        """Return library books (wishlist=False) or wishlist books, ordered by title."""
        cursor = self._conn.execute(
            "SELECT * FROM books WHERE is_wishlist = ? ORDER BY title, id",
            (1 if wishlist else 0,),
        )
        return [row_to_record(row) for row in cursor.fetchall()]

    def count(self) -> int:
        """Number of books in the catalog."""
        return self._conn.execute("SELECT COUNT(*) FROM books").fetchone()[0]

    def update_book(self, book_id: int, **columns: Any) -> None:
        """Update one or more columns on a cataloged book.

        Raises:
            ValueError: If a column name is not part of the books table.
            BookNotFoundError: If the book_id does not exist.
        """
        if not columns:
            if self.get_by_id(book_id) is None:
                raise BookNotFoundError(f"Book with id {book_id} not found")
            return

        _check_columns(columns)
        set_clause = ", ".join(f"{k} = ?" for k in columns)
        cursor = self._conn.execute(
            f"UPDATE books SET {set_clause} WHERE id = ?",
            [*columns.values(), book_id],
        )
        if cursor.rowcount == 0:
            raise BookNotFoundError(f"Book with id {book_id} not found")

    def update_many(self, book_ids: list[int], **columns: Any) -> int:
        """Set the same column values on several books. Returns the affected count."""
        if not book_ids or not columns:
            return 0

        _check_columns(columns)
        set_clause = ", ".join(f"{k} = ?" for k in columns)
        id_placeholders = ", ".join("?" for _ in book_ids)
        cursor = self._conn.execute(
            f"UPDATE books SET {set_clause} WHERE id IN ({id_placeholders})",
            [*columns.values(), *book_ids],
        )
        return cursor.rowcount

    def delete_book(self, book_id: int) -> None:
        """Delete a book from the catalog.

        Raises:
            BookNotFoundError: If the book_id does not exist.
        """
        cursor = self._conn.execute("DELETE FROM books WHERE id = ?", (book_id,))
        if cursor.rowcount == 0:
            raise BookNotFoundError(f"Book with id {book_id} not found")

    def delete_many(self, book_ids: list[int]) -> int:
        """Delete several books. Returns how many rows were actually removed."""
        if not book_ids:
            return 0
        id_placeholders = ", ".join("?" for _ in book_ids)
        cursor = self._conn.execute(
            f"DELETE FROM books WHERE id IN ({id_placeholders})",
            list(book_ids),
        )
        return cursor.rowcount

    def get_many(self, book_ids: list[int]) -> list[BookRecord]:
        """Return the books among book_ids that exist, ordered by ID."""
        if not book_ids:
            return []
        id_placeholders = ", ".join("?" for _ in book_ids)
        cursor = self._conn.execute(
            f"SELECT * FROM books WHERE id IN ({id_placeholders}) ORDER BY id",
            list(book_ids),
        )
        return [row_to_record(row) for row in cursor.fetchall()]
