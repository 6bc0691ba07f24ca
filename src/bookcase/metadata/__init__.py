# ABOUTME: Metadata package: online book search across Google Books and Open Library.
# ABOUTME: Exports the SearchResult type, the provider protocol, and the combined search.

from bookcase.metadata.googlebooks import GoogleBooksProvider
from bookcase.metadata.openlibrary import OpenLibraryProvider
from bookcase.metadata.provider import MetadataProvider
from bookcase.metadata.search import default_providers, search_all
from bookcase.metadata.types import SearchResult

__all__ = [
    "GoogleBooksProvider",
    "MetadataProvider",
    "OpenLibraryProvider",
    "SearchResult",
    "default_providers",
    "search_all",
]
