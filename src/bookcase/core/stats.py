# ABOUTME: Aggregate library statistics: totals, top authors and genres, rating histogram.
# ABOUTME: Wishlist books count only toward the reading goal, which is passed in, never stored.

import math
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from bookcase.db.mapping import BookRecord

_TOP_N = 5


@dataclass
class LibraryStats:
    """Statistics over the owned (non-wishlist) part of a library, plus the reading goal."""

    total_books: int = 0
    books_read: int = 0
    favorite_books: int = 0
    wishlist_books: int = 0
    top_authors: list[tuple[str, int]] = field(default_factory=list)
    top_genres: list[tuple[str, int]] = field(default_factory=list)
    rating_distribution: dict[float, int] = field(default_factory=dict)
    year: int = 0
    finished_this_year: int = 0
    reading_goal: int | None = None

    @property
    def goal_achieved(self) -> bool:
        return self.reading_goal is not None and self.finished_this_year >= self.reading_goal

    @property
    def goal_progress(self) -> float | None:
        """Fraction of the reading goal met, capped at 1.0; None without a goal."""
        if not self.reading_goal:
            return None
        return min(1.0, self.finished_this_year / self.reading_goal)


def _top(counter: Counter[str]) -> list[tuple[str, int]]:
    # Ties keep first-seen order, as Counter.most_common does.
    return counter.most_common(_TOP_N)


def _rating_bucket(rating: float | None) -> float | None:
    """Nearest half star for ratings in [1, 5]; anything else is not charted."""
    if rating is None or not 1 <= rating <= 5:
        return None
    return math.floor(rating * 2 + 0.5) / 2


def _finished_year(record: BookRecord) -> int | None:
    value = record.finished_reading_date
    if not value or len(value) < 4 or not value[:4].isdigit():
        return None
    return int(value[:4])


def library_stats(
    records: Iterable[BookRecord],
    *,
    reading_goal: int | None = None,
    year: int | None = None,
) -> LibraryStats:
    """Compute statistics for a set of books.

    Args:
        records: Every book in the catalog; wishlist entries are counted
            separately and left out of all other figures except
            ``finished_this_year``, which covers every finished book.
        reading_goal: Target number of books to finish in ``year``.
        year: Year for goal tracking. Defaults to the current year.
    """
    stats = LibraryStats(year=year or date.today().year, reading_goal=reading_goal)
    authors: Counter[str] = Counter()
    genres: Counter[str] = Counter()
    ratings: Counter[float] = Counter()

    for record in records:
        if record.read and _finished_year(record) == stats.year:
            stats.finished_this_year += 1
        if record.is_wishlist:
            stats.wishlist_books += 1
            continue

        stats.total_books += 1
        if record.read:
            stats.books_read += 1
        if record.favorite:
            stats.favorite_books += 1

        if record.author and record.author.strip():
            authors[record.author.strip()] += 1
        genres.update(record.genre_list)

        bucket = _rating_bucket(record.rating)
        if bucket is not None:
            ratings[bucket] += 1

    stats.top_authors = _top(authors)
    stats.top_genres = _top(genres)
    stats.rating_distribution = dict(sorted(ratings.items()))
    return stats
