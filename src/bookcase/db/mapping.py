# ABOUTME: Converts between BookRecord dataclasses, SQLite rows, and display-name dicts.
# ABOUTME: FIELDS maps each external column name (CSV header / JSON key) to its DB column.

from dataclasses import dataclass, fields
from typing import Any, Literal, Mapping

FieldKind = Literal["id", "text", "number", "bool", "date"]


@dataclass(frozen=True)
class Field:
    """One book attribute: its external display name, column, and value kind."""

    display: str
    column: str
    kind: FieldKind


# Ordered as exported. Display names are the CSV headers and backup JSON keys.
FIELDS: tuple[Field, ...] = (
    Field("ID", "id", "id"),
    Field("Title", "title", "text"),
    Field("Author", "author", "text"),
    Field("Publisher", "publisher", "text"),
    Field("Published Date", "published_date", "text"),
    Field("Format", "format", "text"),
    Field("Pages", "pages", "number"),
    Field("Series", "series", "text"),
    Field("Volume", "volume", "number"),
    Field("Language", "language", "text"),
    Field("ISBN", "isbn", "text"),
    Field("Page Read", "page_read", "number"),
    Field("Item Url", "item_url", "text"),
    Field("Icon Path", "icon_path", "text"),
    Field("Summary", "summary", "text"),
    Field("Location", "location", "text"),
    Field("Price", "price", "number"),
    Field("Genres", "genres", "text"),
    Field("Rating", "rating", "number"),
    Field("Added Date", "added_date", "date"),
    Field("Copy Index", "copy_index", "number"),
    Field("Read", "read", "bool"),
    Field("Started Reading Date", "started_reading_date", "date"),
    Field("Finished Reading Date", "finished_reading_date", "date"),
    Field("Favorite", "favorite", "bool"),
    Field("Comments", "comments", "text"),
    Field("Tags", "tags", "text"),
    Field("BookShelf", "bookshelf", "text"),
    Field("is_wishlist", "is_wishlist", "bool"),
)

FIELDS_BY_DISPLAY: dict[str, Field] = {f.display: f for f in FIELDS}
FIELDS_BY_COLUMN: dict[str, Field] = {f.column: f for f in FIELDS}

DISPLAY_NAMES: tuple[str, ...] = tuple(f.display for f in FIELDS)

# Transient field: accepted on create/update/import, resolved into Icon Path, never stored.
IMAGE_URL = "Image Url"

_TRUE_TOKENS = frozenset({"true", "t", "yes", "y", "on", "1"})


def parse_bool(value: Any) -> bool:
    """The store's boolean parsing: a handful of truthy tokens, everything else false."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return value != 0
    return str(value).strip().lower() in _TRUE_TOKENS


def _coerce_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip())
    except ValueError:
        return None


def _coerce_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def coerce_value(field: Field, value: Any) -> Any:
    """Coerce a loosely-typed value into the column type for field."""
    if field.kind == "number":
        return _coerce_number(value)
    if field.kind == "bool":
        return parse_bool(value)
    if field.kind == "id":
        return int(value) if value is not None else None
    return _coerce_text(value)


def columns_from_display(data: Mapping[str, Any]) -> dict[str, Any]:
    """Convert a display-name dict into column values.

    Unknown keys, ``ID`` and the transient ``Image Url`` are dropped. Values
    are coerced to the column types; no import-specific normalization
    (dates, comma decimals) happens here.
    """
    columns: dict[str, Any] = {}
    for key, value in data.items():
        field = FIELDS_BY_DISPLAY.get(key)
        if field is None or field.kind == "id":
            continue
        columns[field.column] = coerce_value(field, value)
    return columns


@dataclass
class BookRecord:
    """A cataloged book, one attribute per column of the books table."""

    id: int
    title: str
    author: str
    publisher: str | None = None
    published_date: str | None = None
    format: str | None = None
    pages: float | None = None
    series: str | None = None
    volume: float | None = None
    language: str | None = None
    isbn: str | None = None
    page_read: float | None = None
    item_url: str | None = None
    icon_path: str | None = None
    summary: str | None = None
    location: str | None = None
    price: float | None = None
    genres: str | None = None
    rating: float | None = None
    added_date: str | None = None
    copy_index: float | None = None
    read: bool = False
    started_reading_date: str | None = None
    finished_reading_date: str | None = None
    favorite: bool = False
    comments: str | None = None
    tags: str | None = None
    bookshelf: str | None = None
    is_wishlist: bool = False

    @property
    def genre_list(self) -> list[str]:
        """Genres split on commas, trimmed, empties dropped."""
        return _split_list(self.genres)

    def to_row(self) -> dict[str, Any]:
        """Return the record as a display-name dict in FIELDS order."""
        return {f.display: getattr(self, f.column) for f in FIELDS}


def _split_list(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


_RECORD_COLUMNS = frozenset(f.name for f in fields(BookRecord))


def row_to_record(row: Any) -> BookRecord:
    """Convert a full database row (sqlite3.Row) to a BookRecord."""
    values = {key: row[key] for key in row.keys() if key in _RECORD_COLUMNS}
    for column in ("read", "favorite", "is_wishlist"):
        values[column] = bool(values.get(column))
    return BookRecord(**values)
