# ABOUTME: ISBN helpers shared by the record store, duplicate resolver, and search providers.
# ABOUTME: Normalization strips hyphens and whitespace and is used only for comparison.

import re

_ISBN_SEPARATORS_RE = re.compile(r"[\s-]")


def normalize_isbn(isbn: str) -> str:
    """Strip hyphens and whitespace from an ISBN string.

    The result is only used for equality comparison; the ISBN as entered
    is what gets stored.
    """
    return _ISBN_SEPARATORS_RE.sub("", isbn)
