# ABOUTME: Unit tests for the cover asset store.
# ABOUTME: Covers references, writes, best-effort downloads, Image Url resolution, and deletion.

from pathlib import Path

import httpx
import pytest

from bookcase.covers import (
    COVER_REF_PREFIX,
    CoverStore,
    CoverStoreError,
    cover_ref,
    is_cover_ref,
    is_remote_url,
)
from bookcase.http import BookcaseHttpClient
from tests.fixtures.fakes import FakeHttpClient

COVER_URL = "https://images.example.com/covers/dune.png"


class TestReferences:
    """Tests for the reference helpers."""

    def test_cover_ref(self) -> None:
        assert cover_ref("a.jpg") == f"{COVER_REF_PREFIX}a.jpg"
        assert is_cover_ref("/storage/covers/a.jpg")

    @pytest.mark.parametrize("value", ["https://x/a.jpg", "/other/a.jpg", "a.jpg", "", None])
    def test_not_cover_refs(self, value: str | None) -> None:
        assert not is_cover_ref(value)

    def test_is_remote_url(self) -> None:
        assert is_remote_url("http://x") and is_remote_url("https://x")
        assert not is_remote_url("ftp://x")
        assert not is_remote_url(None)


class TestStoreAndRead:
    """Tests for writing and reading assets."""

    def test_store_generates_unique_names(self, covers: CoverStore) -> None:
        first = covers.store(b"one", ".png")
        second = covers.store(b"two", ".png")
        assert first != second
        assert first.endswith(".png")
        assert covers.read(first) == b"one"

    def test_store_defaults_suffix(self, covers: CoverStore) -> None:
        assert covers.store(b"x", None).endswith(".jpg")
        assert covers.store(b"x", ".not-a-suffix").endswith(".jpg")

    def test_write_named_keeps_filename(self, covers: CoverStore) -> None:
        ref = covers.write_named("1700000000000-42.jpg", b"img")
        assert ref == "/storage/covers/1700000000000-42.jpg"
        assert (covers.root / "1700000000000-42.jpg").read_bytes() == b"img"

    @pytest.mark.parametrize("filename", ["../evil.jpg", "a/b.jpg", "", ".hidden"])
    def test_write_named_rejects_paths(self, covers: CoverStore, filename: str) -> None:
        with pytest.raises(CoverStoreError):
            covers.write_named(filename, b"x")

    def test_read_missing_file(self, covers: CoverStore) -> None:
        with pytest.raises(FileNotFoundError):
            covers.read(cover_ref("gone.jpg"))

    def test_exists(self, covers: CoverStore) -> None:
        ref = covers.store(b"x", ".jpg")
        assert covers.exists(ref)
        assert not covers.exists(cover_ref("gone.jpg"))
        assert not covers.exists("https://x/a.jpg")


class TestFetch:
    """Tests for best-effort downloads."""

    def test_fetch_and_store(self, covers: CoverStore, http_client: FakeHttpClient) -> None:
        http_client.images[COVER_URL] = b"png-bytes"
        ref = covers.fetch_and_store(COVER_URL)
        assert ref is not None and ref.endswith(".png")
        assert covers.read(ref) == b"png-bytes"

    def test_fetch_failure_returns_none(self, covers: CoverStore) -> None:
        assert covers.fetch_and_store("https://unreachable.example.com/a.jpg") is None

    def test_empty_body_returns_none(self, covers: CoverStore, http_client: FakeHttpClient) -> None:
        http_client.images[COVER_URL] = b""
        assert covers.fetch_and_store(COVER_URL) is None

    @pytest.mark.parametrize("url", ["http://[bad", "http://[::zz]/cover.jpg"])
    def test_malformed_url_returns_none(self, tmp_path: Path, url: str) -> None:
        """A malformed URL counts as a failed download, not an error."""
        client = BookcaseHttpClient(
            min_request_interval=0.0,
            max_retries=0,
            transport=httpx.MockTransport(lambda request: httpx.Response(200, content=b"img")),
        )
        store = CoverStore(tmp_path / "covers", http_client=client)
        assert store.fetch_and_store(url) is None
        assert not store.root.exists()


class TestResolveImageUrl:
    """Tests for resolve_image_url()."""

    def test_download_replaces_old_asset(self, covers: CoverStore, http_client: FakeHttpClient) -> None:
        old = covers.store(b"old", ".jpg")
        http_client.images[COVER_URL] = b"new"
        new = covers.resolve_image_url(COVER_URL, old)
        assert new != old
        assert covers.read(new) == b"new"  # type: ignore[arg-type]
        assert not covers.exists(old)

    def test_failed_download_keeps_old(self, covers: CoverStore) -> None:
        old = covers.store(b"old", ".jpg")
        assert covers.resolve_image_url("https://unreachable.example.com/a.jpg", old) == old
        assert covers.exists(old)

    def test_internal_ref_used_as_is(self, covers: CoverStore) -> None:
        ref = covers.store(b"x", ".jpg")
        assert covers.resolve_image_url(ref, None) == ref

    def test_empty_string_clears(self, covers: CoverStore) -> None:
        old = covers.store(b"old", ".jpg")
        assert covers.resolve_image_url("", old) is None
        assert not covers.exists(old)

    def test_none_keeps_old(self, covers: CoverStore) -> None:
        old = covers.store(b"old", ".jpg")
        assert covers.resolve_image_url(None, old) == old


class TestDelete:
    """Tests for delete()."""

    def test_delete_removes_file(self, covers: CoverStore) -> None:
        ref = covers.store(b"x", ".jpg")
        assert covers.delete(ref) is True
        assert not covers.exists(ref)

    def test_delete_missing_is_logged_not_raised(self, covers: CoverStore) -> None:
        assert covers.delete(cover_ref("gone.jpg")) is False

    def test_delete_ignores_external_refs(self, covers: CoverStore, tmp_path: Path) -> None:
        outside = tmp_path / "keep.jpg"
        outside.write_bytes(b"x")
        assert covers.delete(str(outside)) is False
        assert outside.exists()


class TestClose:
    """Tests for close()."""

    def test_closes_client_it_created(self, tmp_path: Path) -> None:
        store = CoverStore(tmp_path / "covers")
        client = store._client()
        assert isinstance(client, BookcaseHttpClient)

        store.close()

        assert client._client.is_closed

    def test_leaves_injected_client_alone(self, covers: CoverStore, http_client: FakeHttpClient) -> None:
        covers.close()
        http_client.images[COVER_URL] = b"still usable"
        assert covers.fetch_and_store(COVER_URL) is not None
