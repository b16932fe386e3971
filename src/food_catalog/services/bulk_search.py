"""Bulk dataset search contract, cursor codec and keyword tokenizer."""

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

from food_catalog.domain.bulk import BulkProduct, BulkSearchPage

MAX_KEYWORD_TOKENS = 6
MIN_KEYWORD_LENGTH = 2

_TOKEN_PATTERN = re.compile(r"[a-z0-9]+")
_CURSOR_SEPARATOR = "|"


class SearchMode(StrEnum):
    """Matching strategy used by the bulk dataset search engine."""

    REGEX = "regex"
    TEXT = "text"
    KEYWORD = "keyword"


def parse_search_mode(raw: str | None) -> SearchMode:
    """Parse a configured search mode, defaulting to regex."""
    cleaned = (raw or "").strip().lower()
    try:
        return SearchMode(cleaned)
    except ValueError:
        return SearchMode.REGEX


@dataclass(frozen=True)
class SearchCursor:
    """Sort key and tie-break id of the last row of the previous page."""

    sort_key: int
    tie_break: str


def encode_cursor(cursor: SearchCursor) -> str:
    """Encode a cursor as ``<sort_key>|<tie_break>``."""
    return f"{cursor.sort_key}{_CURSOR_SEPARATOR}{cursor.tie_break}"


def decode_cursor(raw: str | None) -> SearchCursor | None:
    """Decode a cursor token. Malformed tokens mean "first page"."""
    cleaned = (raw or "").strip()
    if not cleaned:
        return None
    sort_key_raw, separator, tie_break = cleaned.partition(_CURSOR_SEPARATOR)
    if not separator:
        return None
    try:
        sort_key = int(sort_key_raw.strip())
    except ValueError:
        return None
    tie_break = tie_break.strip()
    if not tie_break:
        return None
    return SearchCursor(sort_key=sort_key, tie_break=tie_break)


def tokenize_keywords(query: str) -> list[str]:
    """Split a query into lowercase alphanumeric keyword tokens."""
    tokens: list[str] = []
    for token in _TOKEN_PATTERN.findall(query.lower()):
        if len(token) < MIN_KEYWORD_LENGTH or token in tokens:
            continue
        tokens.append(token)
        if len(tokens) == MAX_KEYWORD_TOKENS:
            break
    return tokens


class BulkDatasetRepository(Protocol):
    """Read interface for the bulk nutrition dataset."""

    search_mode: SearchMode

    def search(self, query: str, limit: int, cursor: str | None) -> BulkSearchPage:
        """Search products by name, brand or keywords."""

    def by_barcode(self, code: str) -> BulkProduct | None:
        """Return a named product for a barcode, if present."""

    def ensure_indexes(self) -> None:
        """Create the indexes search relies on. Safe to call repeatedly."""
