# ABOUTME: Unit tests for database creation and connection setup.
# ABOUTME: Verifies tables, indexes, defaults, pragmas, and the normalize_isbn SQL function.

import sqlite3
from pathlib import Path

import pytest

from bookcase.db.connection import open_library


class TestOpenLibrary:
    """Tests for open_library()."""

    def test_creates_database_and_parents(self, tmp_path: Path) -> None:
        """Opening a missing path creates the file and its directories."""
        db_path = tmp_path / "nested" / "dir" / "library.db"
        conn = open_library(db_path)
        conn.close()
        assert db_path.exists()

    def test_books_table_exists(self, db_path: Path) -> None:
        conn = open_library(db_path)
        tables = {
            row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        }
        conn.close()
        assert {"books", "schema_version"} <= tables

    def test_indexes_exist(self, db_path: Path) -> None:
        conn = open_library(db_path)
        indexes = {
            row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='index'")
        }
        conn.close()
        assert {"idx_books_isbn", "idx_books_title_author", "idx_books_icon_path"} <= indexes

    def test_schema_version_is_one(self, db_path: Path) -> None:
        conn = open_library(db_path)
        version = conn.execute("SELECT MAX(version) FROM schema_version").fetchone()[0]
        conn.close()
        assert version == 1

    def test_reopen_does_not_reapply_schema(self, db_path: Path) -> None:
        """A second open finds the schema and keeps existing data."""
        conn = open_library(db_path)
        conn.execute("INSERT INTO books (title, author) VALUES ('T', 'A')")
        conn.close()

        conn = open_library(db_path)
        count = conn.execute("SELECT COUNT(*) FROM books").fetchone()[0]
        versions = conn.execute("SELECT COUNT(*) FROM schema_version").fetchone()[0]
        conn.close()
        assert count == 1
        assert versions == 1

    def test_wal_mode(self, db_path: Path) -> None:
        conn = open_library(db_path)
        mode = conn.execute("PRAGMA journal_mode").fetchone()[0]
        conn.close()
        assert mode == "wal"

    def test_defaults_for_flags_and_added_date(self, db_path: Path) -> None:
        """Booleans default to 0 and Added Date to the insert time."""
        conn = open_library(db_path)
        conn.execute("INSERT INTO books (title, author) VALUES ('T', 'A')")
        row = conn.execute("SELECT read, favorite, is_wishlist, added_date FROM books").fetchone()
        conn.close()
        assert (row["read"], row["favorite"], row["is_wishlist"]) == (0, 0, 0)
        assert row["added_date"]

    def test_title_and_author_required(self, db_path: Path) -> None:
        conn = open_library(db_path)
        with pytest.raises(sqlite3.IntegrityError):
            conn.execute("INSERT INTO books (title) VALUES ('T')")
        conn.close()

    def test_normalize_isbn_function(self, db_path: Path) -> None:
        """The connection exposes normalize_isbn() to SQL."""
        conn = open_library(db_path)
        value = conn.execute("SELECT normalize_isbn(' 978-0-14 1 ')").fetchone()[0]
        null = conn.execute("SELECT normalize_isbn(NULL)").fetchone()[0]
        conn.close()
        assert value == "9780141"
        assert null is None
