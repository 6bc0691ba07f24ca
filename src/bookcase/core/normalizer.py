# ABOUTME: Field normalization for raw CSV import rows (strings keyed by display name).
# ABOUTME: Canonicalizes dates, booleans, wishlist shelf, and comma-decimal numbers into columns.

import re
from dataclasses import dataclass
from typing import Any, Mapping

from bookcase.db.mapping import FIELDS_BY_DISPLAY, IMAGE_URL, parse_bool

# Key under which the transient Image Url travels through the pipeline.
IMAGE_URL_KEY = "image_url"

_DMY_DATE_RE = re.compile(r"^(\d{2})-(\d{2})-(\d{4})$")
# Longest leading decimal number, the way a lenient float parser reads "12.5 zl".
_LEADING_NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

_AFFIRMATIVE_FIELDS = ("Read", "Favorite")


@dataclass(frozen=True)
class ImportOptions:
    """Per-import settings passed explicitly to the normalizer.

    Attributes:
        affirmative_token: Localized "yes" accepted for Read/Favorite,
            compared case-insensitively.
        wishlist_label: BookShelf value that marks a book as wished-for,
            compared case-insensitively.
    """

    affirmative_token: str = "tak"
    wishlist_label: str = "do kupienia"


def parse_dmy_date(value: str | None) -> str | None:
    """Rewrite a DD-MM-YYYY date as YYYY-MM-DD. Any other input gives None."""
    if not value:
        return None
    match = _DMY_DATE_RE.match(value)
    if match is None:
        return None
    day, month, year = match.groups()
    return f"{year}-{month}-{day}"


def parse_number(value: str | None) -> float | None:
    """Parse a possibly comma-decimal number; unparsable or empty input gives None.

    Only the first comma is treated as the decimal separator ("7,5" -> 7.5).
    Trailing text after a valid number is ignored ("300 pages" -> 300.0).
    """
    if value is None:
        return None
    text = str(value).strip().replace(",", ".", 1)
    match = _LEADING_NUMBER_RE.match(text)
    if match is None:
        return None
    try:
        return float(match.group(0))
    except ValueError:
        return None


def _normalize_flag(value: str | None, affirmative_token: str) -> bool:
    if value and value.strip().lower() == affirmative_token.lower():
        return True
    return parse_bool(value)


def normalize_row(raw: Mapping[str, Any], options: ImportOptions | None = None) -> dict[str, Any]:
    """Convert one raw import row into column values.

    Unknown headers and ``ID`` are ignored. Values that end up None or
    empty are left out entirely so the store's defaults apply; the
    transient Image Url, if any, is returned under IMAGE_URL_KEY.
    """
    opts = options or ImportOptions()
    row: dict[str, Any] = {}

    for key, value in raw.items():
        field = FIELDS_BY_DISPLAY.get(key)
        if field is None or field.kind == "id":
            continue
        text = None if value is None else str(value)

        if field.kind == "number":
            row[field.column] = parse_number(text)
        elif field.kind == "date":
            row[field.column] = parse_dmy_date(text)
        elif field.kind == "bool":
            if key in _AFFIRMATIVE_FIELDS:
                row[field.column] = _normalize_flag(text, opts.affirmative_token)
            else:
                row[field.column] = parse_bool(text)
        else:
            row[field.column] = text if text and text.strip() else None

    shelf = row.get("bookshelf")
    if shelf and shelf.strip().lower() == opts.wishlist_label.lower():
        row["is_wishlist"] = True

    image_url = raw.get(IMAGE_URL)
    if image_url:
        row[IMAGE_URL_KEY] = str(image_url).strip()

    return {k: v for k, v in row.items() if v is not None and v != ""}


def has_required_fields(row: Mapping[str, Any]) -> bool:
    """Whether a normalized row still has a non-empty title and author."""
    title = row.get("title")
    author = row.get("author")
    return bool(title and title.strip() and author and author.strip())

