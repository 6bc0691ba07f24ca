# ABOUTME: Export and backup pipelines: CSV export and self-contained JSON backups.
# ABOUTME: Backups embed cover bytes as base64 keyed by filename so they restore anywhere.

import base64
import csv
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, TextIO

from bookcase.covers import CoverStore, CoverStoreError, is_cover_ref
from bookcase.db.catalog import LibraryCatalog
from bookcase.db.mapping import DISPLAY_NAMES

logger = logging.getLogger(__name__)

BACKUP_BOOKS_KEY = "books"
BACKUP_IMAGES_KEY = "images"


def default_export_name(now: datetime | None = None) -> str:
    stamp = int((now or datetime.now()).timestamp() * 1000)
    return f"library-export-{stamp}.csv"


def default_backup_name(now: datetime | None = None) -> str:
    return f"backup-{(now or datetime.now()).strftime('%Y-%m-%d')}.json"


def _format_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def write_csv(catalog: LibraryCatalog, stream: TextIO) -> int:
    """Write every book as a CSV row (header first) to an open text stream.

    The caller owns the stream's encoding; export_csv adds the BOM.
    Returns the number of book rows written.
    """
    writer = csv.writer(stream)
    writer.writerow(DISPLAY_NAMES)
    count = 0
    for record in catalog.list_all():
        row = record.to_row()
        writer.writerow([_format_cell(row[name]) for name in DISPLAY_NAMES])
        count += 1
    return count


def export_csv(catalog: LibraryCatalog, dest: Path) -> int:
    """Export all books, all columns, to a UTF-8 CSV file with a byte-order mark.

    The BOM makes spreadsheet tools detect UTF-8 so non-ASCII titles
    display correctly. Rows are ordered by ID.

    Returns:
        The number of books exported.
    """
    dest.parent.mkdir(parents=True, exist_ok=True)
    with dest.open("w", encoding="utf-8-sig", newline="") as stream:
        count = write_csv(catalog, stream)
    logger.info("Exported %d book(s) to %s", count, dest)
    return count


def build_backup(catalog: LibraryCatalog, covers: CoverStore) -> dict[str, Any]:
    """Build a full backup payload: every book plus the bytes of its stored cover.

    Returns:
        ``{"books": [...], "images": {filename: base64}}``. Each book is a
        display-name dict whose internal Icon Path is replaced by the bare
        filename. A cover reference whose file is missing is dropped from
        the book (logged) rather than exported as a dangling reference.
    """
    books: list[dict[str, Any]] = []
    images: dict[str, str] = {}

    for record in catalog.list_all():
        book = record.to_row()
        icon_path = book.get("Icon Path")
        if is_cover_ref(icon_path):
            try:
                data = covers.read(icon_path)
            except (OSError, CoverStoreError) as exc:
                logger.warning("Cover %s of book %d not included: %s", icon_path, record.id, exc)
                book["Icon Path"] = None
            else:
                filename = covers.filename_of(icon_path)
                images[filename] = base64.b64encode(data).decode("ascii")
                book["Icon Path"] = filename
        books.append(book)

    return {BACKUP_BOOKS_KEY: books, BACKUP_IMAGES_KEY: images}


def write_backup(catalog: LibraryCatalog, covers: CoverStore, dest: Path) -> dict[str, int]:
    """Write a full backup JSON document to dest.

    Returns:
        Counts: ``{"books": n, "images": m}``.
    """
    payload = build_backup(catalog, covers)
    dest.parent.mkdir(parents=True, exist_ok=True)
    with dest.open("w", encoding="utf-8") as stream:
        json.dump(payload, stream, ensure_ascii=False, indent=2)

    counts = {
        "books": len(payload[BACKUP_BOOKS_KEY]),
        "images": len(payload[BACKUP_IMAGES_KEY]),
    }
    logger.info("Wrote backup of %d book(s) and %d cover(s) to %s", counts["books"], counts["images"], dest)
    return counts
