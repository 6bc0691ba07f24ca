# ABOUTME: Duplicate resolution for import candidates against the current catalog state.
# ABOUTME: ISBN match first (hyphens/spaces ignored), exact title+author match as fallback.

from typing import Any, Mapping

from bookcase.db.catalog import LibraryCatalog
from bookcase.db.mapping import BookRecord
from bookcase.isbn import normalize_isbn


def find_duplicate(catalog: LibraryCatalog, row: Mapping[str, Any]) -> BookRecord | None:
    """Return the stored record that row duplicates, or None.

    A row with a non-empty normalized ISBN is a duplicate of any record
    whose normalized ISBN is equal. Only when that finds nothing is the
    title/author pair compared, exactly and case-sensitively.

    The lookup runs against the catalog as it is now, so inside an import
    transaction it sees the rows inserted earlier in the same batch.

    Args:
        catalog: The catalog to check against.
        row: A normalized row (column names as keys).
    """
    isbn = row.get("isbn")
    if isbn and normalize_isbn(isbn):
        existing = catalog.find_by_normalized_isbn(isbn)
        if existing is not None:
            return existing

    title = row.get("title")
    author = row.get("author")
    if title and author:
        return catalog.find_by_title_author(title, author)
    return None
