# ABOUTME: Restore pipeline: the inverse of a full backup.
# ABOUTME: Writes embedded covers back to the store, then inserts every book with a fresh ID.

import base64
import binascii
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from bookcase.core.exporter import BACKUP_BOOKS_KEY, BACKUP_IMAGES_KEY
from bookcase.covers import CoverStore, CoverStoreError, cover_ref, is_cover_ref, is_remote_url
from bookcase.db.catalog import LibraryCatalog
from bookcase.db.mapping import columns_from_display

logger = logging.getLogger(__name__)


class RestoreError(Exception):
    """Raised when a backup cannot be restored; no book from it was kept."""


@dataclass
class RestoreResult:
    """Summary of a restore operation."""

    books_restored: int = 0
    images_restored: int = 0


def _anchor_icon_path(icon_path: Any) -> str | None:
    """Turn a backup's bare cover filename back into an internal reference."""
    if not icon_path:
        return None
    icon_path = str(icon_path)
    if is_cover_ref(icon_path) or is_remote_url(icon_path) or icon_path.startswith("/"):
        return icon_path
    return cover_ref(icon_path)


def _validate(payload: Any) -> tuple[list[Any], dict[str, Any]]:
    if not isinstance(payload, dict):
        raise RestoreError("Backup must be a JSON object with 'books' and 'images'")
    books = payload.get(BACKUP_BOOKS_KEY)
    images = payload.get(BACKUP_IMAGES_KEY) or {}
    if not isinstance(books, list):
        raise RestoreError("Backup is missing its 'books' list")
    if not isinstance(images, dict):
        raise RestoreError("Backup 'images' must map filenames to base64 data")
    return books, images


def _write_images(images: dict[str, Any], covers: CoverStore, created: list[str]) -> int:
    count = 0
    for filename, encoded in images.items():
        try:
            data = base64.b64decode(encoded, validate=True)
            ref = cover_ref(filename)
            existed = covers.exists(ref)
            covers.write_named(filename, data)
        except (binascii.Error, TypeError, CoverStoreError, OSError) as exc:
            raise RestoreError(f"Could not restore cover {filename!r}: {exc}") from exc
        if not existed:
            created.append(ref)
        count += 1
    return count


def restore_backup(payload: Any, catalog: LibraryCatalog, covers: CoverStore) -> RestoreResult:
    """Restore a full backup payload into the catalog and cover store.

    Every image is written under its backup filename first. Books are then
    inserted in one transaction: the ID is dropped so a new one is
    assigned, and a bare-filename Icon Path is re-anchored to the cover
    store. No duplicate resolution happens, so restoring over an existing
    library duplicates its books.

    If any insert fails, all inserts roll back and the cover files this
    restore created are deleted again; files that existed before are left
    alone since other books may reference them.

    Raises:
        RestoreError: On a malformed payload or a failed insert.
    """
    books, images = _validate(payload)
    result = RestoreResult()
    created: list[str] = []

    try:
        result.images_restored = _write_images(images, covers, created)
        with catalog.transaction():
            for index, book in enumerate(books):
                if not isinstance(book, dict):
                    raise RestoreError(f"Book entry {index} is not an object")
                columns = columns_from_display(book)
                columns["icon_path"] = _anchor_icon_path(book.get("Icon Path"))
                catalog.add_book(columns)
                result.books_restored += 1
    except Exception as exc:
        for ref in created:
            covers.delete(ref)
        logger.error("Restore failed after %d book(s): %s", result.books_restored, exc)
        if isinstance(exc, RestoreError):
            raise
        raise RestoreError(f"Failed to restore backup: {exc}") from exc

    logger.info(
        "Restored %d book(s) and %d cover(s)", result.books_restored, result.images_restored
    )
    return result


def restore_file(path: Path, catalog: LibraryCatalog, covers: CoverStore) -> RestoreResult:
    """Read a backup JSON document from path and restore it."""
    try:
        with path.open(encoding="utf-8-sig") as stream:
            payload = json.load(stream)
    except (OSError, ValueError) as exc:
        raise RestoreError(f"Could not read backup {path}: {exc}") from exc
    return restore_backup(payload, catalog, covers)
