# ABOUTME: Import pipeline for cataloging books from a header-driven CSV file.
# ABOUTME: Normalizes rows, skips duplicates, fetches covers, and inserts all-or-nothing.

import csv
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, TextIO

from bookcase.core.dedup import find_duplicate
from bookcase.core.normalizer import (
    IMAGE_URL_KEY,
    ImportOptions,
    has_required_fields,
    normalize_row,
)
from bookcase.covers import CoverStore
from bookcase.db.catalog import LibraryCatalog

logger = logging.getLogger(__name__)

_BOM = "\ufeff"

NO_VALID_ROWS_MESSAGE = (
    "No valid book data was found in the file. Please ensure the CSV has "
    '"Title" and "Author" columns with data, and that books are not already '
    "in your library."
)


class LibraryImportError(Exception):
    """Base class for import failures that leave the catalog unchanged."""


class NoValidRowsError(LibraryImportError):
    """Raised when a file produced neither new books nor duplicates."""


class ImportFailedError(LibraryImportError):
    """Raised when an unexpected error aborted the batch and it was rolled back."""


@dataclass
class SkippedBook:
    """Identity of a row skipped as a duplicate."""

    title: str | None
    author: str | None


@dataclass
class ImportResult:
    """Summary of an import operation."""

    added: int = 0
    skipped: int = 0
    skipped_books: list[SkippedBook] = field(default_factory=list)

    @property
    def message(self) -> str:
        return (
            f"Import complete. Added: {self.added} new books. "
            f"Skipped: {self.skipped} duplicates."
        )

    def to_dict(self) -> dict[str, Any]:
        """Summary in the shape API callers expect."""
        return {
            "message": self.message,
            "newBooksCount": self.added,
            "skippedBooksCount": self.skipped,
            "skippedBooks": [
                {"Title": book.title, "Author": book.author} for book in self.skipped_books
            ],
        }


def _read_csv_rows(stream: TextIO) -> Iterator[dict[str, Any]]:
    """Yield header-keyed rows, tolerating a BOM left on the first header."""
    reader = csv.DictReader(stream)
    fieldnames = reader.fieldnames
    if fieldnames and fieldnames[0].startswith(_BOM):
        reader.fieldnames = [fieldnames[0].lstrip(_BOM), *fieldnames[1:]]
    yield from reader


def _import_row(
    line: int,
    raw: Mapping[str, Any],
    catalog: LibraryCatalog,
    covers: CoverStore,
    options: ImportOptions,
    result: ImportResult,
    written: list[str],
) -> None:
    row = normalize_row(raw, options)

    if find_duplicate(catalog, row) is not None:
        result.skipped += 1
        result.skipped_books.append(SkippedBook(title=raw.get("Title"), author=raw.get("Author")))
        logger.debug("Row %d skipped as duplicate: %s / %s", line, raw.get("Title"), raw.get("Author"))
        return

    if not has_required_fields(row):
        logger.debug("Row %d ignored: missing title or author", line)
        return

    # Icon Path is always derived from Image Url; a copied path would share another record's asset.
    image_url = row.pop(IMAGE_URL_KEY, None)
    row.pop("icon_path", None)
    icon_path = covers.resolve_image_url(image_url, None)
    if icon_path:
        if icon_path != image_url:
            written.append(icon_path)
        row["icon_path"] = icon_path

    book_id = catalog.add_book(row)
    result.added += 1
    logger.debug("Row %d added as book %d", line, book_id)


def import_rows(
    rows: Iterable[Mapping[str, Any]],
    catalog: LibraryCatalog,
    covers: CoverStore,
    *,
    options: ImportOptions | None = None,
) -> ImportResult:
    """Import raw rows (display name -> string) into the catalog.

    Rows are processed in order, each against the catalog as left by the
    previous ones. For each row: normalize, skip if it duplicates a stored
    book (recording its title/author), ignore it if title or author is
    empty, resolve its Image Url into a stored cover, insert.

    The whole batch runs in one immediate transaction, so concurrent
    imports queue behind each other. Any error rolls back every insert of
    the batch and deletes the covers it downloaded.

    Args:
        rows: Raw rows; may be a lazy iterator (e.g. a CSV reader).
        catalog: The library catalog to add books to.
        covers: Cover store used for Image Url downloads.
        options: Localized tokens for booleans and the wishlist shelf.

    Returns:
        ImportResult with counts of added and skipped rows.

    Raises:
        ImportFailedError: If the batch was aborted and rolled back.
        NoValidRowsError: If no row was added or skipped.
    """
    opts = options or ImportOptions()
    result = ImportResult()
    written: list[str] = []

    try:
        with catalog.transaction(immediate=True):
            for line, raw in enumerate(rows, start=1):
                _import_row(line, raw, catalog, covers, opts, result, written)
    except Exception as exc:
        for ref in written:
            covers.delete(ref)
        logger.error("Import failed, rolled back %d insert(s): %s", result.added, exc)
        raise ImportFailedError(
            f"Failed to import books: {exc}. All changes have been rolled back."
        ) from exc

    if result.added == 0 and result.skipped == 0:
        raise NoValidRowsError(NO_VALID_ROWS_MESSAGE)

    logger.info("Import finished: %d added, %d skipped", result.added, result.skipped)
    return result


def import_csv(
    source: Path | TextIO,
    catalog: LibraryCatalog,
    covers: CoverStore,
    *,
    options: ImportOptions | None = None,
) -> ImportResult:
    """Import a UTF-8 CSV file (BOM optional) whose first row is the header.

    Header names must match the book display names exactly ("Title",
    "Published Date", ...); unknown columns are ignored. See import_rows
    for the per-row rules and failure modes.
    """
    if isinstance(source, Path):
        try:
            with source.open(encoding="utf-8-sig", newline="") as stream:
                return import_rows(_read_csv_rows(stream), catalog, covers, options=options)
        except OSError as exc:
            raise ImportFailedError(f"Failed to import books: {exc}") from exc
    return import_rows(_read_csv_rows(source), catalog, covers, options=options)
