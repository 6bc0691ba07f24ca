# ABOUTME: Manual book editing: add, update, bulk update, and delete with cover bookkeeping.
# ABOUTME: Keeps Icon Path pointing at a live asset and clamps Rating to the 0-5 star range.

import logging
from typing import Any, Mapping

from bookcase.covers import CoverStore
from bookcase.db.catalog import BookNotFoundError, LibraryCatalog
from bookcase.db.mapping import IMAGE_URL, BookRecord, columns_from_display

logger = logging.getLogger(__name__)

MIN_RATING = 0.0
MAX_RATING = 5.0


def clamp_rating(value: float | None) -> float | None:
    """Clamp a rating into [0, 5]; None stays None."""
    if value is None:
        return None
    return min(MAX_RATING, max(MIN_RATING, value))


def _prepare(fields: Mapping[str, Any]) -> dict[str, Any]:
    columns = columns_from_display(fields)
    if "rating" in columns:
        columns["rating"] = clamp_rating(columns["rating"])
    if "added_date" in columns and columns["added_date"] is None:
        del columns["added_date"]
    return columns


def add_book(catalog: LibraryCatalog, covers: CoverStore, fields: Mapping[str, Any]) -> int:
    """Add a book from display-name fields (manual entry or a search result).

    ``Image Url`` may be a remote URL (downloaded), an internal cover
    reference (used as-is), or absent. Rating is clamped to [0, 5].

    Returns:
        The new book's ID.

    Raises:
        ValueError: If Title or Author is missing or blank.
    """
    columns = _prepare(fields)
    if not columns.get("title") or not columns.get("author"):
        raise ValueError("Title and Author are required")

    columns.pop("icon_path", None)
    icon_path = covers.resolve_image_url(fields.get(IMAGE_URL), None)
    if icon_path:
        columns["icon_path"] = icon_path

    try:
        book_id = catalog.add_book(columns)
    except Exception:
        if icon_path and icon_path != fields.get(IMAGE_URL):
            covers.delete(icon_path)
        raise
    logger.info("Added book %d: %s", book_id, columns["title"])
    return book_id


def update_book(
    catalog: LibraryCatalog,
    covers: CoverStore,
    book_id: int,
    fields: Mapping[str, Any],
) -> BookRecord:
    """Update a book from display-name fields and return the updated record.

    Only the given fields change. When ``Image Url`` is present the cover
    is re-resolved: a new download or a different internal reference
    replaces the old asset (which is deleted), an empty string clears it,
    and a failed download keeps it.

    Raises:
        BookNotFoundError: If book_id does not exist.
        ValueError: If Title or Author would become blank.
    """
    existing = catalog.get_by_id(book_id)
    if existing is None:
        raise BookNotFoundError(f"Book with id {book_id} not found")

    columns = _prepare(fields)
    for required in ("title", "author"):
        if required in columns and not columns[required]:
            raise ValueError(f"{required.capitalize()} cannot be empty")

    columns.pop("icon_path", None)
    if IMAGE_URL in fields:
        new_icon = covers.resolve_image_url(fields[IMAGE_URL], existing.icon_path)
        if new_icon != existing.icon_path:
            columns["icon_path"] = new_icon

    catalog.update_book(book_id, **columns)
    updated = catalog.get_by_id(book_id)
    assert updated is not None
    return updated


def bulk_update(catalog: LibraryCatalog, book_ids: list[int], updates: Mapping[str, Any]) -> int:
    """Set the same display-name fields on many books. Returns the affected count.

    Icon Path and Image Url are not bulk-editable; covers are per book.

    Raises:
        ValueError: If no book ids or no editable fields were given, or a
            required field would become blank.
    """
    if not book_ids:
        raise ValueError("Book IDs must be provided as a non-empty list")
    columns = _prepare(updates)
    columns.pop("icon_path", None)
    if not columns:
        raise ValueError("No editable fields given")
    for required in ("title", "author"):
        if required in columns and not columns[required]:
            raise ValueError(f"{required.capitalize()} cannot be empty")

    with catalog.transaction():
        count = catalog.update_many(book_ids, **columns)
    logger.info("Bulk-updated %d book(s): %s", count, ", ".join(columns))
    return count


def delete_books(catalog: LibraryCatalog, covers: CoverStore, book_ids: list[int]) -> int:
    """Delete books and release their cover assets.

    Records are removed in one transaction; covers are deleted once it
    commits so a failed delete never leaves a record without its asset.

    Returns:
        Number of books deleted.

    Raises:
        ValueError: If book_ids is empty.
        BookNotFoundError: If none of the ids exist.
    """
    if not book_ids:
        raise ValueError("Book IDs must be provided as a non-empty list")

    with catalog.transaction():
        records = catalog.get_many(book_ids)
        count = catalog.delete_many(book_ids)

    if count == 0:
        raise BookNotFoundError("No matching books found to delete")

    for record in records:
        covers.delete(record.icon_path)
    logger.info("Deleted %d book(s)", count)
    return count
