# ABOUTME: Integration tests running the pipelines end to end against a real database file.
# ABOUTME: Export-then-import, re-import idempotence, and backup-then-restore into a fresh library.

import base64
from pathlib import Path

from bookcase.core.exporter import build_backup, export_csv, write_backup
from bookcase.core.importer import import_csv
from bookcase.core.restore import restore_backup, restore_file
from bookcase.covers import CoverStore
from bookcase.db.catalog import LibraryCatalog
from bookcase.db.connection import open_library

_COMPARED = ("title", "author", "isbn", "pages", "rating", "read", "favorite", "genres", "is_wishlist")


def _fresh(tmp_path: Path, name: str) -> tuple[LibraryCatalog, CoverStore]:
    conn = open_library(tmp_path / name / "library.db")
    return LibraryCatalog(conn), CoverStore(tmp_path / name / "covers")


def _seed(catalog: LibraryCatalog, covers: CoverStore) -> None:
    catalog.add_book(
        {
            "title": "Lalka",
            "author": "Bolesław Prus",
            "isbn": "978-83-240-1234-5",
            "pages": 680.0,
            "rating": 4.5,
            "read": True,
            "genres": "Classic, Novel",
            "icon_path": covers.write_named("100-1.jpg", b"\xff\xd8jpeg"),
        }
    )
    catalog.add_book({"title": "Solaris", "author": "Stanisław Lem", "favorite": True})
    catalog.add_book({"title": "Wanted", "author": "Someone", "is_wishlist": True})


def _snapshot(catalog: LibraryCatalog) -> list[tuple]:
    return [tuple(getattr(r, c) for c in _COMPARED) for r in catalog.list_all()]


class TestCsvRoundTrip:
    """Exported CSV files import cleanly."""

    def test_export_then_import_into_empty_library(
        self, catalog: LibraryCatalog, covers: CoverStore, tmp_path: Path
    ) -> None:
        _seed(catalog, covers)
        path = tmp_path / "export.csv"
        export_csv(catalog, path)

        target, target_covers = _fresh(tmp_path, "target")
        result = import_csv(path, target, target_covers)

        assert (result.added, result.skipped) == (3, 0)
        assert _snapshot(target) == _snapshot(catalog)

    def test_reimport_into_same_library_skips_everything(
        self, catalog: LibraryCatalog, covers: CoverStore, tmp_path: Path
    ) -> None:
        _seed(catalog, covers)
        path = tmp_path / "export.csv"
        export_csv(catalog, path)

        result = import_csv(path, catalog, covers)

        assert (result.added, result.skipped) == (0, 3)
        assert catalog.count() == 3

    def test_second_import_of_same_file_adds_nothing(
        self, catalog: LibraryCatalog, covers: CoverStore, write_csv
    ) -> None:
        path = write_csv(
            [
                {"Title": "Dune", "Author": "FH", "ISBN": "9780441172719"},
                {"Title": "Emma", "Author": "JA"},
            ]
        )
        first = import_csv(path, catalog, covers)
        second = import_csv(path, catalog, covers)
        assert (first.added, first.skipped) == (2, 0)
        assert (second.added, second.skipped) == (0, 2)


class TestBackupRoundTrip:
    """Backups restore into a different library with covers intact."""

    def test_backup_then_restore(self, catalog: LibraryCatalog, covers: CoverStore, tmp_path: Path) -> None:
        _seed(catalog, covers)
        path = tmp_path / "backup.json"
        write_backup(catalog, covers, path)

        target, target_covers = _fresh(tmp_path, "target")
        result = restore_file(path, target, target_covers)

        assert (result.books_restored, result.images_restored) == (3, 1)
        assert _snapshot(target) == _snapshot(catalog)
        restored = target.list_all()[0]
        assert restored.icon_path == "/storage/covers/100-1.jpg"
        assert target_covers.read(restored.icon_path) == b"\xff\xd8jpeg"

    def test_backup_is_self_contained(self, catalog: LibraryCatalog, covers: CoverStore) -> None:
        _seed(catalog, covers)
        payload = build_backup(catalog, covers)
        assert base64.b64decode(payload["images"]["100-1.jpg"]) == b"\xff\xd8jpeg"
        assert all(not str(b.get("Icon Path") or "").startswith("/") for b in payload["books"])

    def test_restore_twice_duplicates(self, catalog: LibraryCatalog, covers: CoverStore, tmp_path: Path) -> None:
        _seed(catalog, covers)
        payload = build_backup(catalog, covers)
        target, target_covers = _fresh(tmp_path, "target")
        restore_backup(payload, target, target_covers)
        restore_backup(payload, target, target_covers)
        assert target.count() == 6
