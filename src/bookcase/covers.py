# ABOUTME: Cover asset store: keeps cover image bytes on disk, addressed by reference strings.
# ABOUTME: Handles uploads, best-effort downloads, replacement, reading, and deletion.

import logging
import random
import re
import time
from pathlib import Path, PurePosixPath
from urllib.parse import urlparse

from bookcase.http import BookcaseHttpClient, FetchError, HttpClient

logger = logging.getLogger(__name__)

DEFAULT_COVERS_DIR = Path.home() / ".bookcase" / "covers"

# Book records reference stored covers as COVER_REF_PREFIX + filename.
COVER_REF_PREFIX = "/storage/covers/"

_DEFAULT_SUFFIX = ".jpg"
_SUFFIX_RE = re.compile(r"^\.[A-Za-z0-9]{1,5}$")
_FILENAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class CoverStoreError(Exception):
    """Raised for cover references or filenames the store refuses to handle."""


def is_remote_url(value: str | None) -> bool:
    return bool(value) and value.startswith(("http://", "https://"))  # type: ignore[union-attr]


def is_cover_ref(value: str | None) -> bool:
    """Whether value points at an asset held by a CoverStore."""
    return bool(value) and value.startswith(COVER_REF_PREFIX)  # type: ignore[union-attr]


def cover_ref(filename: str) -> str:
    """Build the reference string stored in a book record for filename."""
    return f"{COVER_REF_PREFIX}{filename}"


def _clean_suffix(suffix: str | None) -> str:
    if suffix and not suffix.startswith("."):
        suffix = f".{suffix}"
    if suffix and _SUFFIX_RE.match(suffix):
        return suffix.lower()
    return _DEFAULT_SUFFIX


def _unique_filename(suffix: str) -> str:
    return f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}{suffix}"


class CoverStore:
    """Directory-backed store for cover images.

    Files are written under ``root`` with generated names
    (``<ms-timestamp>-<random><ext>``) unless restored from a backup, in
    which case the backup's filename is kept. Network access goes through
    an injectable HttpClient so downloads can be faked in tests.
    """

    def __init__(self, root: Path, http_client: HttpClient | None = None) -> None:
        self._root = root
        self._http = http_client
        self._owned_http: BookcaseHttpClient | None = None

    @property
    def root(self) -> Path:
        return self._root

    def _client(self) -> HttpClient:
        if self._http is None:
            self._owned_http = BookcaseHttpClient(min_request_interval=0.0, max_retries=1)
            self._http = self._owned_http
        return self._http

    def close(self) -> None:
        """Close the HTTP client this store created; an injected client is left open."""
        if self._owned_http is not None:
            self._owned_http.close()
            self._owned_http = None
            self._http = None

    def filename_of(self, ref: str) -> str:
        """Return the bare filename of an internal reference.

        Raises:
            CoverStoreError: If ref is not an internal cover reference.
        """
        if not is_cover_ref(ref):
            raise CoverStoreError(f"Not a cover reference: {ref!r}")
        return self._check_filename(PurePosixPath(ref).name)

    def path_for(self, ref: str) -> Path:
        """Filesystem path backing an internal reference."""
        return self._root / self.filename_of(ref)

    def exists(self, ref: str | None) -> bool:
        if not is_cover_ref(ref):
            return False
        try:
            return self.path_for(ref).is_file()  # type: ignore[arg-type]
        except CoverStoreError:
            return False

    def store(self, data: bytes, suffix: str | None = None) -> str:
        """Write image bytes under a fresh name and return its reference."""
        filename = _unique_filename(_clean_suffix(suffix))
        return self.write_named(filename, data)

    def write_named(self, filename: str, data: bytes) -> str:
        """Write image bytes under the given filename, replacing any existing file.

        Raises:
            CoverStoreError: If filename is empty or contains path components.
        """
        self._check_filename(filename)
        self._root.mkdir(parents=True, exist_ok=True)
        (self._root / filename).write_bytes(data)
        logger.debug("Stored cover %s (%d bytes)", filename, len(data))
        return cover_ref(filename)

    def fetch_and_store(self, url: str) -> str | None:
        """Download an image and store it. Best-effort: returns None on any failure."""
        try:
            data = self._client().get_bytes(url)
        except FetchError as exc:
            logger.error("Failed to download image from %s: %s", url, exc)
            return None
        if not data:
            logger.error("Failed to download image from %s: empty response", url)
            return None
        try:
            suffix = PurePosixPath(urlparse(url).path).suffix
            return self.store(data, suffix)
        except (OSError, ValueError) as exc:
            logger.error("Failed to save image from %s: %s", url, exc)
            return None

    def read(self, ref: str) -> bytes:
        """Return the bytes of a stored cover.

        Raises:
            CoverStoreError: If ref is not an internal cover reference.
            FileNotFoundError: If the asset file is missing.
        """
        return self.path_for(ref).read_bytes()

    def delete(self, ref: str | None) -> bool:
        """Delete the asset behind ref. Non-internal references are ignored.

        Failures are logged, never raised: a stale file must not block the
        record operation that released it. Returns True if a file was removed.
        """
        if not is_cover_ref(ref):
            return False
        try:
            path = self.path_for(ref)  # type: ignore[arg-type]
            path.unlink()
        except (CoverStoreError, OSError) as exc:
            logger.error("Failed to delete cover %s: %s", ref, exc)
            return False
        logger.debug("Deleted cover %s", ref)
        return True

    def resolve_image_url(self, image_url: str | None, old_ref: str | None) -> str | None:
        """Work out the Icon Path for a record given a transient Image Url.

        - http(s) URL: downloaded; on failure the old reference is kept.
        - Internal reference: used as-is.
        - Empty string: the cover is cleared.
        - None or anything else: the old reference is kept.

        When the reference changes, the old asset is deleted.
        """
        new_ref = old_ref
        changed = False

        if is_remote_url(image_url):
            downloaded = self.fetch_and_store(image_url)  # type: ignore[arg-type]
            if downloaded:
                new_ref = downloaded
                changed = True
        elif is_cover_ref(image_url):
            if image_url != old_ref:
                new_ref = image_url
                changed = True
        elif image_url == "":
            new_ref = None
            changed = True

        if changed and old_ref and old_ref != new_ref:
            self.delete(old_ref)

        return new_ref

    @staticmethod
    def _check_filename(filename: str) -> str:
        if not _FILENAME_RE.match(filename) or ".." in filename:
            raise CoverStoreError(f"Invalid cover filename: {filename!r}")
        return filename
