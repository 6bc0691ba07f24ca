# ABOUTME: SQLite database connection management for the Bookcase library catalog.
# ABOUTME: Opens or creates the database, applies schema, and registers SQL helpers.

import logging
import sqlite3
from pathlib import Path

from bookcase.db.schema import SCHEMA_V1
from bookcase.isbn import normalize_isbn

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / ".bookcase" / "library.db"

# Seconds a connection waits on another writer's lock (e.g. a concurrent import).
_BUSY_TIMEOUT = 30.0


def _schema_exists(conn: sqlite3.Connection) -> bool:
    """Check if the schema has already been applied."""
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name='schema_version'"
    )
    return cursor.fetchone() is not None


def _apply_schema(conn: sqlite3.Connection) -> None:
    """Execute the DDL to create all tables and indexes."""
    conn.executescript(SCHEMA_V1)


def _sql_normalize_isbn(value: str | None) -> str | None:
    return normalize_isbn(value) if value is not None else None


def open_library(path: Path | None = None) -> sqlite3.Connection:
    """Open or create the Bookcase library database.

    Creates the database file and parent directories if they don't exist.
    Applies the schema on first creation. The connection runs in autocommit
    mode; batch operations open explicit transactions through
    LibraryCatalog.transaction(). Registers a deterministic
    ``normalize_isbn(text)`` SQL function used by duplicate detection.

    Args:
        path: Path to the database file. Defaults to ~/.bookcase/library.db.

    Returns:
        A configured sqlite3.Connection.
    """
    db_path = path or DEFAULT_DB_PATH
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path), timeout=_BUSY_TIMEOUT, isolation_level=None)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    conn.create_function("normalize_isbn", 1, _sql_normalize_isbn, deterministic=True)

    if not _schema_exists(conn):
        logger.info("Creating library database at %s", db_path)
        _apply_schema(conn)

    return conn
