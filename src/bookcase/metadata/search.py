# ABOUTME: Hybrid metadata search across several providers.
# ABOUTME: Tolerates failing providers and de-duplicates results by cover image URL.

import logging
from collections.abc import Sequence

from bookcase.http import FetchError, HttpClient
from bookcase.metadata.googlebooks import GoogleBooksProvider
from bookcase.metadata.openlibrary import OpenLibraryProvider
from bookcase.metadata.provider import MetadataProvider
from bookcase.metadata.types import SearchResult

logger = logging.getLogger(__name__)


def default_providers(
    http_client: HttpClient, *, google_api_key: str | None = None
) -> list[MetadataProvider]:
    """Google Books first, then Open Library."""
    return [
        GoogleBooksProvider(http_client, api_key=google_api_key),
        OpenLibraryProvider(http_client),
    ]


def search_all(query: str, providers: Sequence[MetadataProvider]) -> list[SearchResult]:
    """Query every provider in order and merge their results.

    A provider that fails is logged and skipped. Only results with a cover
    image are kept, and each image URL appears once (first provider wins),
    since the same edition is usually listed by several sources.

    Raises:
        ValueError: If the query is blank.
    """
    if not query.strip():
        raise ValueError("Search query is required")

    combined: list[SearchResult] = []
    seen_images: set[str] = set()

    for provider in providers:
        try:
            results = provider.search(query)
        except FetchError as exc:
            logger.error("%s search failed: %s", provider.name, exc)
            continue

        for result in results:
            if result.image_url and result.image_url not in seen_images:
                seen_images.add(result.image_url)
                combined.append(result)

    return combined
