# ABOUTME: Google Books metadata provider implementation.
# ABOUTME: Searches the volumes API and maps volumeInfo entries to SearchResults.

import logging
import re
from typing import Any

from bookcase.http import HttpClient
from bookcase.metadata.types import SearchResult

logger = logging.getLogger(__name__)

_GOOGLE_BOOKS_BASE = "https://www.googleapis.com/books/v1"
_MAX_RESULTS = 40

# Largest first.
_IMAGE_SIZES = ("extraLarge", "large", "medium", "small", "thumbnail", "smallThumbnail")
_HTTP_SCHEME_RE = re.compile(r"^http://", re.IGNORECASE)


def best_image_url(image_links: dict[str, str] | None) -> str | None:
    """Pick the largest available cover image, upgraded to https."""
    if not image_links:
        return None
    for size in _IMAGE_SIZES:
        url = image_links.get(size)
        if url:
            return _HTTP_SCHEME_RE.sub("https://", url)
    return None


def _pick_isbn(identifiers: list[dict[str, str]]) -> str | None:
    for wanted in ("ISBN_13", "ISBN_10"):
        for entry in identifiers:
            if entry.get("type") == wanted and entry.get("identifier"):
                return entry["identifier"]
    return None


def parse_volume(item: dict[str, Any]) -> SearchResult:
    """Convert one item of a Google Books volumes response."""
    info = item.get("volumeInfo") or {}
    return SearchResult(
        title=info.get("title", "Unknown"),
        authors=list(info.get("authors") or []),
        publisher=info.get("publisher"),
        published_date=info.get("publishedDate"),
        summary=info.get("description"),
        isbn=_pick_isbn(info.get("industryIdentifiers") or []),
        pages=info.get("pageCount"),
        image_url=best_image_url(info.get("imageLinks")),
        rating=info.get("averageRating"),
        source="googlebooks",
    )


class GoogleBooksProvider:
    """Metadata provider backed by the Google Books volumes API.

    An API key is optional; anonymous requests share a lower quota.
    """

    def __init__(self, http_client: HttpClient, api_key: str | None = None) -> None:
        self._http = http_client
        self._api_key = api_key

    @property
    def name(self) -> str:
        return "googlebooks"

    def search(self, query: str) -> list[SearchResult]:
        """Free-text (or ISBN) search. Raises FetchError if the API fails."""
        params = {"q": query, "maxResults": str(_MAX_RESULTS)}
        if self._api_key:
            params["key"] = self._api_key
        data = self._http.get(f"{_GOOGLE_BOOKS_BASE}/volumes", params=params)
        items = data.get("items") or []
        logger.debug("Google Books returned %d item(s) for %r", len(items), query)
        return [parse_volume(item) for item in items]
