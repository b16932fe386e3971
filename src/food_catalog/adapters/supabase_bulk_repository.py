"""Supabase implementation of the bulk dataset search engine."""

import logging
from dataclasses import dataclass

from supabase import Client

from food_catalog.adapters.postgrest_filters import name_or_brand_match, quote_value
from food_catalog.domain.bulk import BulkProduct, BulkSearchPage
from food_catalog.services.bulk_search import (
    BulkDatasetRepository,
    SearchCursor,
    SearchMode,
    decode_cursor,
    encode_cursor,
    tokenize_keywords,
)

_COLUMNS = (
    "id,code,product_name,brands,popularity_key,unique_scans_n,"
    "serving_size,quantity,nutriments,keywords"
)
_TEXT_SEARCH_FUNCTION = "search_off_products_text"
_ENSURE_INDEXES_FUNCTION = "ensure_off_product_indexes"

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseBulkRepository(BulkDatasetRepository):
    """Bulk dataset search over a Supabase table of Open Food Facts products.

    ``regex`` matches a literal substring of the name or brand ordered by
    popularity, ``keyword`` matches precomputed keywords ordered by unique
    scans, and ``text`` ranks by full-text score through an RPC. Score ranking
    is not stable between calls, so ``text`` mode never returns a cursor.
    """

    client: Client
    table: str = "off_products"
    search_mode: SearchMode = SearchMode.REGEX

    def search(self, query: str, limit: int, cursor: str | None) -> BulkSearchPage:
        """Search products with the configured strategy."""
        query = query.strip()
        if not query or limit <= 0:
            return BulkSearchPage(products=[])
        if self.search_mode is SearchMode.TEXT:
            return self._search_text(query, limit)
        if self.search_mode is SearchMode.KEYWORD:
            return self._search_keywords(query, limit, decode_cursor(cursor))
        return self._search_regex(query, limit, decode_cursor(cursor))

    def by_barcode(self, code: str) -> BulkProduct | None:
        """Look up by explicit barcode, then by primary id."""
        code = code.strip()
        if not code:
            return None
        # Some dataset dumps only store the barcode as the primary key.
        for column in ("code", "id"):
            response = (
                self.client.table(self.table)
                .select(_COLUMNS)
                .eq(column, code)
                .neq("product_name", "")
                .limit(1)
                .execute()
            )
            products = _named_products(response.data)
            if products:
                return products[0]
        return None

    def ensure_indexes(self) -> None:
        """Create sort, keyword and (in text mode) full-text indexes."""
        self.client.rpc(
            _ENSURE_INDEXES_FUNCTION,
            {"search_mode": self.search_mode.value, "table_name": self.table},
        ).execute()
        _logger.info(
            "Bulk dataset indexes ensured: table=%s mode=%s",
            self.table,
            self.search_mode,
        )

    def _search_regex(
        self, query: str, limit: int, cursor: SearchCursor | None
    ) -> BulkSearchPage:
        match = name_or_brand_match(query, "product_name", "brands")
        if cursor is not None:
            after = _after_cursor("popularity_key", cursor)
            match = f"and(or({match}),or({after}))"
        response = (
            self.client.table(self.table)
            .select(_COLUMNS)
            .neq("product_name", "")
            .neq("id", "")
            .or_(match)
            .order("popularity_key", desc=True)
            .order("id")
            .limit(limit)
            .execute()
        )
        return _page(response.data or [], limit, "popularity_key")

    def _search_keywords(
        self, query: str, limit: int, cursor: SearchCursor | None
    ) -> BulkSearchPage:
        tokens = tokenize_keywords(query)
        if not tokens:
            return BulkSearchPage(products=[])
        builder = (
            self.client.table(self.table)
            .select(_COLUMNS)
            .neq("product_name", "")
            .neq("id", "")
            .overlaps("keywords", tokens)
        )
        if cursor is not None:
            builder = builder.or_(_after_cursor("unique_scans_n", cursor))
        response = (
            builder.order("unique_scans_n", desc=True)
            .order("id")
            .limit(limit)
            .execute()
        )
        return _page(response.data or [], limit, "unique_scans_n")

    def _search_text(self, query: str, limit: int) -> BulkSearchPage:
        response = self.client.rpc(
            _TEXT_SEARCH_FUNCTION,
            {"search_query": query, "result_limit": limit, "table_name": self.table},
        ).execute()
        return BulkSearchPage(products=_named_products(response.data))


def _after_cursor(sort_column: str, cursor: SearchCursor) -> str:
    """Rows after the cursor under ``sort_column desc, id asc``."""
    key = cursor.sort_key
    return (
        f"{sort_column}.lt.{key},"
        f"and({sort_column}.eq.{key},id.gt.{quote_value(cursor.tie_break)})"
    )


def _page(
    rows: list[dict[str, object]], limit: int, sort_column: str
) -> BulkSearchPage:
    """Build a page, emitting a cursor from the last row when the page is full."""
    next_cursor = None
    if len(rows) >= limit:
        last = rows[-1]
        next_cursor = encode_cursor(
            SearchCursor(
                sort_key=_as_int(last.get(sort_column)),
                tie_break=str(last["id"]),
            )
        )
    return BulkSearchPage(products=_named_products(rows), next_cursor=next_cursor)


def _named_products(rows: list[dict[str, object]] | None) -> list[BulkProduct]:
    products = [_parse_product(row) for row in rows or []]
    return [product for product in products if product.product_name.strip()]


def _parse_product(row: dict[str, object]) -> BulkProduct:
    """Parse a bulk dataset row into a raw product."""
    nutriments = row.get("nutriments")
    keywords = row.get("keywords")
    return BulkProduct(
        id=str(row.get("id") or ""),
        code=str(row.get("code") or ""),
        product_name=str(row.get("product_name") or ""),
        brands=str(row.get("brands") or ""),
        popularity_key=_as_int(row.get("popularity_key")),
        unique_scans_n=_as_int(row.get("unique_scans_n")),
        serving_size=str(row.get("serving_size") or ""),
        quantity=str(row.get("quantity") or ""),
        nutriments=nutriments if isinstance(nutriments, dict) else {},
        keywords=tuple(keywords) if isinstance(keywords, list) else (),
    )


def _as_int(value: object) -> int:
    if isinstance(value, bool) or value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
