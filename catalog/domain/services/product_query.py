"""Filter -> sort -> paginate over an in-memory product list.

Everything here is pure: functions take a product sequence and return new
lists, never touching the input. Query parameters arrive as raw strings
(straight from the query string) and are parsed leniently: bad values fall
back to defaults instead of failing the request.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from catalog.domain.models.product import CatalogStats, PriceStatistics, Product, ProductPage

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
SORT_FIELDS = ("price", "name")

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_int_prefix(raw: Optional[str]) -> Optional[int]:
    """Read the leading integer of a string: "12abc" -> 12, "1.9" -> 1, "x" -> None."""
    if raw is None:
        return None
    m = _LEADING_INT.match(str(raw))
    return int(m.group(1)) if m else None


def parse_float_prefix(raw: Optional[str]) -> Optional[float]:
    """Read the leading decimal number of a string: "99.5usd" -> 99.5, "" -> None."""
    if raw is None:
        return None
    m = _LEADING_FLOAT.match(str(raw))
    return float(m.group(1)) if m else None


@dataclass(frozen=True)
class ProductQuery:
    """Optional list parameters, kept as the raw strings the client sent."""

    category: Optional[str] = None
    search: Optional[str] = None
    max_price: Optional[str] = None
    available: Optional[str] = None
    sort: Optional[str] = None
    order: Optional[str] = None
    page: Optional[str] = None
    limit: Optional[str] = None

    def page_number(self) -> int:
        # 0 and unparsable both mean "not given"
        return max(1, parse_int_prefix(self.page) or DEFAULT_PAGE)

    def page_size(self, max_page_size: Optional[int] = None) -> int:
        size = max(1, parse_int_prefix(self.limit) or DEFAULT_PAGE_SIZE)
        if max_page_size is not None:
            size = min(size, max_page_size)
        return size

    def price_ceiling(self) -> Optional[float]:
        value = parse_float_prefix(self.max_price)
        return value if value is not None and value > 0 else None


# ----- Filters ---------------------------------------------------------------

def filter_by_category(products: Iterable[Product], category: str) -> list[Product]:
    wanted = category.strip().lower()
    return [p for p in products if p.category.lower() == wanted]


def filter_by_text(products: Iterable[Product], text: str) -> list[Product]:
    # Name and description only; category is not part of full-text search.
    needle = text.strip().lower()
    return [p for p in products if needle in p.name.lower() or needle in p.description.lower()]


def filter_by_max_price(products: Iterable[Product], max_price: float) -> list[Product]:
    return [p for p in products if p.price <= max_price]


def filter_by_availability(products: Iterable[Product], available: Optional[str]) -> list[Product]:
    if available == "true":
        return [p for p in products if p.stock > 0]
    if available == "false":
        return [p for p in products if p.stock == 0]
    return list(products)


def sort_products(products: Iterable[Product], field: Optional[str], order: Optional[str] = None) -> list[Product]:
    """Stable sort by price or name; unknown fields leave the order untouched."""
    items = list(products)
    if field not in SORT_FIELDS:
        return items
    descending = order == "desc"
    if field == "price":
        return sorted(items, key=lambda p: p.price, reverse=descending)
    # casefold first so "apple" and "Apple" sit together, raw name breaks ties
    return sorted(items, key=lambda p: (p.name.casefold(), p.name), reverse=descending)


def paginate(products: Sequence[Product], page: int, limit: int) -> ProductPage:
    total = len(products)
    start = (page - 1) * limit
    return ProductPage(
        items=list(products[start:start + limit]),
        count=total,
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit) if total else 0,
    )


# ----- Pipeline --------------------------------------------------------------

def query_products(
    products: Sequence[Product],
    query: ProductQuery,
    *,
    max_page_size: Optional[int] = None,
) -> ProductPage:
    """Apply category, text, price and availability filters, then sort, then paginate."""
    result: list[Product] = list(products)

    if query.category and query.category.strip():
        result = filter_by_category(result, query.category)
    if query.search and query.search.strip():
        result = filter_by_text(result, query.search)

    ceiling = query.price_ceiling()
    if ceiling is not None:
        result = filter_by_max_price(result, ceiling)

    result = filter_by_availability(result, query.available)
    result = sort_products(result, query.sort, query.order)

    return paginate(result, query.page_number(), query.page_size(max_page_size))


def top_cheapest_available(products: Iterable[Product], top: int = 3) -> list[Product]:
    """The `top` cheapest products that still have stock, cheapest first."""
    in_stock = [p for p in products if p.stock > 0]
    return sorted(in_stock, key=lambda p: p.price)[:top]


def cheapest_in_category(products: Iterable[Product], category: str) -> Optional[Product]:
    candidates = [p for p in filter_by_category(products, category) if p.stock > 0]
    if not candidates:
        return None
    return min(candidates, key=lambda p: p.price)


# ----- Statistics ------------------------------------------------------------

def median(sorted_values: Sequence[float]) -> float:
    """Median of an already sorted sequence; mean of the two middles when even."""
    n = len(sorted_values)
    if n == 0:
        return 0
    mid = n // 2
    if n % 2 == 0:
        return (sorted_values[mid - 1] + sorted_values[mid]) / 2
    return sorted_values[mid]


def price_statistics(products: Iterable[Product]) -> PriceStatistics:
    """min/max/average/median from one sorted copy of the prices (all 0 when empty)."""
    prices = sorted(p.price for p in products)
    if not prices:
        return PriceStatistics()
    lo, hi = prices[0], prices[-1]
    # float summation can drift a ulp past the extremes on uniform prices
    average = min(max(math.fsum(prices) / len(prices), lo), hi)
    return PriceStatistics(min=lo, max=hi, average=average, median=median(prices))


def catalog_stats(products: Sequence[Product]) -> CatalogStats:
    """Count, mean price, rounded price statistics and per-category counts of one product list."""
    counts: dict[str, int] = {}
    for p in products:
        counts[p.category] = counts.get(p.category, 0) + 1
    return CatalogStats(
        total_products=len(products),
        average_price=math.fsum(p.price for p in products) / len(products) if products else 0,
        price_stats=price_statistics(products).rounded(),
        category_counts=counts,
    )
