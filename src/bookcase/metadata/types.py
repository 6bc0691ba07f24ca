# ABOUTME: SearchResult, the candidate metadata record returned by online search providers.
# ABOUTME: to_row() turns a result into a raw book row for manual add or CSV-style import.

from dataclasses import dataclass, field
from typing import Any

from bookcase.db.mapping import IMAGE_URL


@dataclass
class SearchResult:
    """One candidate book found by a metadata provider.

    Only title is guaranteed; providers fill in whatever else they know.
    """

    title: str
    authors: list[str] = field(default_factory=list)
    publisher: str | None = None
    published_date: str | None = None
    summary: str | None = None
    isbn: str | None = None
    pages: int | None = None
    image_url: str | None = None
    rating: float | None = None
    source: str = ""

    @property
    def author(self) -> str:
        """Convenience property: joined author string for display."""
        return ", ".join(self.authors) if self.authors else ""

    def to_row(self) -> dict[str, Any]:
        """Display-name dict accepted by editor.add_book and the import pipeline."""
        row: dict[str, Any] = {
            "Title": self.title,
            "Author": self.author,
            "Publisher": self.publisher,
            "Published Date": self.published_date,
            "Summary": self.summary,
            "ISBN": self.isbn,
            "Pages": self.pages,
            "Rating": self.rating,
            IMAGE_URL: self.image_url,
        }
        return {k: v for k, v in row.items() if v not in (None, "")}
