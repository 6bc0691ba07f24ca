# ABOUTME: SQL DDL statements for the Bookcase library database schema.
# ABOUTME: Defines the books table, its indexes, and the schema version table.

SCHEMA_V1 = """
-- Core book catalog table
CREATE TABLE books (
    id                    INTEGER PRIMARY KEY AUTOINCREMENT,
    title                 TEXT NOT NULL,
    author                TEXT NOT NULL,
    publisher             TEXT,
    published_date        TEXT,
    format                TEXT,
    pages                 REAL,
    series                TEXT,
    volume                REAL,
    language              TEXT,
    isbn                  TEXT,
    page_read             REAL,
    item_url              TEXT,
    icon_path             TEXT,
    summary               TEXT,
    location              TEXT,
    price                 REAL,
    genres                TEXT,
    rating                REAL,
    added_date            TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now')),
    copy_index            REAL,
    read                  INTEGER NOT NULL DEFAULT 0,
    started_reading_date  TEXT,
    finished_reading_date TEXT,
    favorite              INTEGER NOT NULL DEFAULT 0,
    comments              TEXT,
    tags                  TEXT,
    bookshelf             TEXT,
    is_wishlist           INTEGER NOT NULL DEFAULT 0
);

CREATE INDEX idx_books_isbn ON books(isbn) WHERE isbn IS NOT NULL;
CREATE INDEX idx_books_title_author ON books(title, author);
CREATE INDEX idx_books_icon_path ON books(icon_path) WHERE icon_path IS NOT NULL;

-- Version of the schema this file was created with
CREATE TABLE schema_version (
    version    INTEGER NOT NULL,
    applied_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

INSERT INTO schema_version (version) VALUES (1);
"""
