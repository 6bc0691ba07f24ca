# ABOUTME: Public API for the Bookcase library database layer.
# ABOUTME: Exports connection management, catalog operations, and data types.

from bookcase.db.catalog import BookNotFoundError, LibraryCatalog
from bookcase.db.connection import DEFAULT_DB_PATH, open_library
from bookcase.db.mapping import FIELDS, BookRecord

__all__ = [
    "DEFAULT_DB_PATH",
    "FIELDS",
    "BookNotFoundError",
    "BookRecord",
    "LibraryCatalog",
    "open_library",
]
