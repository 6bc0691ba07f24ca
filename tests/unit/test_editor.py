# ABOUTME: Unit tests for manual add, update, bulk update, and delete.
# ABOUTME: Focuses on cover bookkeeping, rating clamping, and validation errors.

import pytest

from bookcase.core.editor import add_book, bulk_update, clamp_rating, delete_books, update_book
from bookcase.covers import CoverStore, is_cover_ref
from bookcase.db.catalog import BookNotFoundError, LibraryCatalog
from tests.fixtures.fakes import FakeHttpClient

COVER_URL = "https://images.example.com/dune.jpg"
OTHER_URL = "https://images.example.com/dune-2.jpg"


class TestClampRating:
    """Tests for clamp_rating()."""

    @pytest.mark.parametrize(("value", "expected"), [(7.0, 5.0), (-1.0, 0.0), (3.5, 3.5), (None, None)])
    def test_clamp(self, value: float | None, expected: float | None) -> None:
        assert clamp_rating(value) == expected


class TestAddBook:
    """Tests for add_book()."""

    def test_adds_with_downloaded_cover(
        self, catalog: LibraryCatalog, covers: CoverStore, http_client: FakeHttpClient
    ) -> None:
        http_client.images[COVER_URL] = b"img"
        book_id = add_book(catalog, covers, {"Title": "Dune", "Author": "FH", "Image Url": COVER_URL})
        record = catalog.get_by_id(book_id)
        assert record is not None
        assert is_cover_ref(record.icon_path)

    def test_rating_is_clamped(self, catalog: LibraryCatalog, covers: CoverStore) -> None:
        book_id = add_book(catalog, covers, {"Title": "Dune", "Author": "FH", "Rating": 9})
        assert catalog.get_by_id(book_id).rating == 5.0  # type: ignore[union-attr]

    def test_icon_path_field_ignored(self, catalog: LibraryCatalog, covers: CoverStore) -> None:
        book_id = add_book(catalog, covers, {"Title": "Dune", "Author": "FH", "Icon Path": "/etc/passwd"})
        assert catalog.get_by_id(book_id).icon_path is None  # type: ignore[union-attr]

    @pytest.mark.parametrize("fields", [{"Title": "Dune"}, {"Title": " ", "Author": "FH"}])
    def test_requires_title_and_author(
        self, catalog: LibraryCatalog, covers: CoverStore, fields: dict[str, str]
    ) -> None:
        with pytest.raises(ValueError, match="required"):
            add_book(catalog, covers, fields)


class TestUpdateBook:
    """Tests for update_book()."""

    def test_updates_given_fields_only(self, catalog: LibraryCatalog, covers: CoverStore) -> None:
        book_id = catalog.add_book({"title": "Dune", "author": "FH", "location": "Shelf 1"})
        record = update_book(catalog, covers, book_id, {"Rating": 4, "Favorite": "yes"})
        assert record.rating == 4.0
        assert record.favorite is True
        assert record.location == "Shelf 1"

    def test_new_cover_replaces_old(
        self, catalog: LibraryCatalog, covers: CoverStore, http_client: FakeHttpClient
    ) -> None:
        old = covers.store(b"old", ".jpg")
        book_id = catalog.add_book({"title": "Dune", "author": "FH", "icon_path": old})
        http_client.images[OTHER_URL] = b"new"

        record = update_book(catalog, covers, book_id, {"Image Url": OTHER_URL})

        assert record.icon_path != old
        assert covers.read(record.icon_path) == b"new"  # type: ignore[arg-type]
        assert not covers.exists(old)

    def test_empty_image_url_clears_cover(self, catalog: LibraryCatalog, covers: CoverStore) -> None:
        old = covers.store(b"old", ".jpg")
        book_id = catalog.add_book({"title": "Dune", "author": "FH", "icon_path": old})
        record = update_book(catalog, covers, book_id, {"Image Url": ""})
        assert record.icon_path is None
        assert not covers.exists(old)

    def test_cover_untouched_without_image_url(self, catalog: LibraryCatalog, covers: CoverStore) -> None:
        old = covers.store(b"old", ".jpg")
        book_id = catalog.add_book({"title": "Dune", "author": "FH", "icon_path": old})
        record = update_book(catalog, covers, book_id, {"Title": "Dune (1965)"})
        assert record.icon_path == old

    def test_missing_book(self, catalog: LibraryCatalog, covers: CoverStore) -> None:
        with pytest.raises(BookNotFoundError):
            update_book(catalog, covers, 99, {"Rating": 3})

    def test_blank_title_rejected(self, catalog: LibraryCatalog, covers: CoverStore) -> None:
        book_id = catalog.add_book({"title": "Dune", "author": "FH"})
        with pytest.raises(ValueError, match="Title"):
            update_book(catalog, covers, book_id, {"Title": ""})


class TestBulkUpdate:
    """Tests for bulk_update()."""

    def test_updates_all(self, catalog: LibraryCatalog) -> None:
        ids = [catalog.add_book({"title": t, "author": "X"}) for t in ("A", "B", "C")]
        assert bulk_update(catalog, ids[:2], {"BookShelf": "Attic", "Read": "true"}) == 2
        shelves = [(r.title, r.bookshelf, r.read) for r in catalog.list_all()]
        assert shelves == [("A", "Attic", True), ("B", "Attic", True), ("C", None, False)]

    def test_empty_ids(self, catalog: LibraryCatalog) -> None:
        with pytest.raises(ValueError, match="non-empty"):
            bulk_update(catalog, [], {"Read": True})

    def test_no_editable_fields(self, catalog: LibraryCatalog) -> None:
        book_id = catalog.add_book({"title": "A", "author": "X"})
        with pytest.raises(ValueError, match="No editable fields"):
            bulk_update(catalog, [book_id], {"Icon Path": "x.jpg", "Unknown": 1})


class TestDeleteBooks:
    """Tests for delete_books()."""

    def test_deletes_records_and_covers(self, catalog: LibraryCatalog, covers: CoverStore) -> None:
        ref = covers.store(b"img", ".jpg")
        ids = [
            catalog.add_book({"title": "A", "author": "X", "icon_path": ref}),
            catalog.add_book({"title": "B", "author": "Y"}),
        ]
        assert delete_books(catalog, covers, ids) == 2
        assert catalog.count() == 0
        assert not covers.exists(ref)

    def test_partial_ids(self, catalog: LibraryCatalog, covers: CoverStore) -> None:
        book_id = catalog.add_book({"title": "A", "author": "X"})
        assert delete_books(catalog, covers, [book_id, 500]) == 1

    def test_none_found(self, catalog: LibraryCatalog, covers: CoverStore) -> None:
        with pytest.raises(BookNotFoundError):
            delete_books(catalog, covers, [1, 2])

    def test_empty_ids(self, catalog: LibraryCatalog, covers: CoverStore) -> None:
        with pytest.raises(ValueError):
            delete_books(catalog, covers, [])
