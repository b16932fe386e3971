"""Raw bulk dataset rows."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class BulkProduct:
    """A product row from the bulk nutrition dataset, before normalization."""

    id: str
    code: str = ""
    product_name: str = ""
    brands: str = ""
    popularity_key: int = 0
    unique_scans_n: int = 0
    serving_size: str = ""
    quantity: str = ""
    nutriments: dict[str, object] = field(default_factory=dict)
    keywords: tuple[str, ...] = ()


@dataclass(frozen=True)
class BulkSearchPage:
    """Raw products for one page plus the continuation cursor, if any."""

    products: list[BulkProduct]
    next_cursor: str | None = None
