# ABOUTME: MetadataProvider protocol defining the contract for online book search sources.
# ABOUTME: Google Books and Open Library implement it; search_all() combines them.

from typing import Protocol, runtime_checkable

from bookcase.metadata.types import SearchResult


@runtime_checkable
class MetadataProvider(Protocol):
    """Protocol for metadata search services.

    Implementations take a free-text or ISBN query and return candidate
    records. They raise bookcase.http.FetchError when the service fails;
    an empty list means the service answered with no matches.
    """

    @property
    def name(self) -> str: ...

    def search(self, query: str) -> list[SearchResult]: ...
