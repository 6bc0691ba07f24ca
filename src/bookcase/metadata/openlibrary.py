# ABOUTME: Open Library metadata provider implementation.
# ABOUTME: Searches openlibrary.org/search.json and maps result docs to SearchResults.

import logging
from typing import Any

from bookcase.http import HttpClient
from bookcase.metadata.types import SearchResult

logger = logging.getLogger(__name__)

_OL_BASE = "https://openlibrary.org"
_COVERS_BASE = "https://covers.openlibrary.org/b/id"


def _first_sentence(doc: dict[str, Any]) -> str | None:
    """Open Library exposes the first sentence either flat or as a list."""
    value = doc.get("first_sentence_value")
    if value:
        return value
    sentences = doc.get("first_sentence")
    if isinstance(sentences, list) and sentences:
        return sentences[0]
    if isinstance(sentences, str):
        return sentences
    return None


def _pick_isbn(isbns: list[str]) -> str | None:
    """Prefer a 13-digit ISBN, else the first one listed."""
    for isbn in isbns:
        if len(isbn) == 13:
            return isbn
    return isbns[0] if isbns else None


def parse_search_doc(doc: dict[str, Any]) -> SearchResult:
    """Convert one doc of an Open Library search response."""
    publishers = doc.get("publisher") or []
    first_year = doc.get("first_publish_year")
    cover_id = doc.get("cover_i")
    return SearchResult(
        title=doc.get("title", "Unknown"),
        authors=list(doc.get("author_name") or []),
        publisher=publishers[0] if publishers else None,
        published_date=str(first_year) if first_year is not None else None,
        summary=_first_sentence(doc),
        isbn=_pick_isbn(list(doc.get("isbn") or [])),
        pages=doc.get("number_of_pages_median"),
        image_url=f"{_COVERS_BASE}/{cover_id}-L.jpg" if cover_id else None,
        source="openlibrary",
    )


class OpenLibraryProvider:
    """Metadata provider backed by the Open Library search API.

    Uses dependency-injected HttpClient for testability.
    """

    def __init__(self, http_client: HttpClient) -> None:
        self._http = http_client

    @property
    def name(self) -> str:
        return "openlibrary"

    def search(self, query: str) -> list[SearchResult]:
        """Free-text (or ISBN) search. Raises FetchError if the API fails."""
        data = self._http.get(f"{_OL_BASE}/search.json", params={"q": query})
        docs = data.get("docs") or []
        logger.debug("Open Library returned %d doc(s) for %r", len(docs), query)
        return [parse_search_doc(doc) for doc in docs]
