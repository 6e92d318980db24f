# catalog/domain/repositories/memory_product_repo.py

from __future__ import annotations

import asyncio
import logging
import re
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional, Sequence

from catalog.domain.models.product import MUTABLE_FIELDS, CatalogStats, PriceStatistics, Product, ProductCreate
from catalog.domain.repositories.contracts import ProductRepository
from catalog.domain.services import product_query as pq

logger = logging.getLogger(__name__)

_CANONICAL_ID = re.compile(r"0|[1-9][0-9]*")


def _sequence_of(product_id: str) -> int:
    # ids not issued by the sequence ("A", "01", "²") never advance it
    return int(product_id) if _CANONICAL_ID.fullmatch(product_id) else 0


class InMemoryProductRepository(ProductRepository):
    """
    Product repository holding the catalog in process memory.

    The list is owned by the instance and guarded by an asyncio.Lock; every
    method yields to the event loop once (optionally sleeping `latency`
    seconds) before touching it, so concurrent requests interleave only at
    that point and a mutation is never observed half-done.
    Ids are "1", "2", ... and are never reused, even after deletes.
    """

    def __init__(self, products: Optional[Iterable[Product]] = None, *, latency: float = 0.0):
        self._products: list[Product] = list(products or [])
        self._last_id = max((_sequence_of(p.id) for p in self._products), default=0)
        self._latency = latency
        self._lock = asyncio.Lock()

    async def _yield(self) -> None:
        await asyncio.sleep(self._latency)

    def _index_of(self, product_id: str) -> int:
        for i, p in enumerate(self._products):
            if p.id == product_id:
                return i
        return -1

    # ----- Create ------------------------------------------------------------

    async def create(self, data: ProductCreate) -> Product:
        await self._yield()
        async with self._lock:
            self._last_id += 1
            product = Product(
                **data.model_dump(),
                id=str(self._last_id),
                created_at=datetime.now(timezone.utc),
            )
            self._products.append(product)
        logger.info("memory_repo create id=%s name=%r", product.id, product.name)
        return product

    # ----- Read --------------------------------------------------------------

    async def find_all(self) -> list[Product]:
        await self._yield()
        async with self._lock:
            return list(self._products)

    async def find_by_id(self, product_id: str) -> Product | None:
        await self._yield()
        async with self._lock:
            i = self._index_of(product_id)
            return self._products[i] if i >= 0 else None

    async def find_by_category(self, category: str) -> list[Product]:
        await self._yield()
        async with self._lock:
            return pq.filter_by_category(self._products, category)

    async def search(self, text: str) -> list[Product]:
        await self._yield()
        async with self._lock:
            return pq.filter_by_text(self._products, text)

    async def find_by_price_range(self, min_price: float, max_price: float) -> list[Product]:
        await self._yield()
        async with self._lock:
            return [p for p in self._products if min_price <= p.price <= max_price]

    async def find_in_stock(self) -> list[Product]:
        await self._yield()
        async with self._lock:
            return [p for p in self._products if p.stock > 0]

    async def get_categories(self) -> list[str]:
        await self._yield()
        async with self._lock:
            return sorted({p.category for p in self._products})

    # ----- Update ------------------------------------------------------------

    async def update(self, product_id: str, changes: Mapping[str, Any]) -> Product | None:
        patch = {k: v for k, v in changes.items() if k in MUTABLE_FIELDS}
        await self._yield()
        async with self._lock:
            i = self._index_of(product_id)
            if i < 0:
                return None
            updated = self._products[i].model_copy(update=patch)
            self._products[i] = updated
        logger.info("memory_repo update id=%s fields=%s", product_id, sorted(patch))
        return updated

    async def exists(self, product_id: str) -> bool:
        await self._yield()
        async with self._lock:
            return self._index_of(product_id) >= 0

    # ----- Delete ------------------------------------------------------------

    async def delete(self, product_id: str) -> bool:
        await self._yield()
        async with self._lock:
            i = self._index_of(product_id)
            if i < 0:
                return False
            del self._products[i]
        logger.info("memory_repo delete id=%s", product_id)
        return True

    async def replace_all(self, products: Sequence[Product]) -> tuple[int, int]:
        await self._yield()
        async with self._lock:
            deleted = len(self._products)
            self._products = list(products)
            # keep the sequence monotonic across a replace
            self._last_id = max([self._last_id, *(_sequence_of(p.id) for p in self._products)])
        logger.info("memory_repo replace_all deleted=%s inserted=%s", deleted, len(products))
        return deleted, len(products)

    # ----- Stats -------------------------------------------------------------

    async def count(self) -> int:
        await self._yield()
        async with self._lock:
            return len(self._products)

    async def get_average_price(self) -> float:
        await self._yield()
        async with self._lock:
            if not self._products:
                return 0
            return sum(p.price for p in self._products) / len(self._products)

    async def get_category_stats(self) -> dict[str, int]:
        await self._yield()
        async with self._lock:
            stats: dict[str, int] = {}
            for p in self._products:
                stats[p.category] = stats.get(p.category, 0) + 1
            return stats

    async def get_price_statistics(self) -> PriceStatistics:
        await self._yield()
        async with self._lock:
            return pq.price_statistics(self._products).rounded()

    async def get_catalog_stats(self) -> CatalogStats:
        await self._yield()
        async with self._lock:
            snapshot = list(self._products)
        return pq.catalog_stats(snapshot)
