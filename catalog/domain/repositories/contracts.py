"""Capability contracts a product storage backend can satisfy.

Each contract is small on purpose: a controller is handed only the
capability it needs, so a backend may implement any subset of them.
Unknown ids are answered with ``None`` / ``False``; only backend failures
raise (see ``catalog.domain.exceptions.BackendFailure``).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence

from catalog.domain.models.product import CatalogStats, PriceStatistics, Product, ProductCreate


class CreateProductRepository(ABC):

    @abstractmethod
    async def create(self, data: ProductCreate) -> Product:
        """Store a new product, assigning a fresh id and the creation time."""


class ReadProductRepository(ABC):

    @abstractmethod
    async def find_all(self) -> list[Product]:
        """Return every product."""

    @abstractmethod
    async def find_by_id(self, product_id: str) -> Product | None:
        """Return a product by its id, or None if not found."""

    @abstractmethod
    async def find_by_category(self, category: str) -> list[Product]:
        """Case-insensitive exact match on category."""

    @abstractmethod
    async def search(self, text: str) -> list[Product]:
        """Case-insensitive substring match on name or description."""

    @abstractmethod
    async def find_by_price_range(self, min_price: float, max_price: float) -> list[Product]:
        """Products with min_price <= price <= max_price."""

    @abstractmethod
    async def find_in_stock(self) -> list[Product]:
        """Products with stock > 0."""

    @abstractmethod
    async def get_categories(self) -> list[str]:
        """Distinct category names, sorted."""


class UpdateProductRepository(ABC):

    @abstractmethod
    async def update(self, product_id: str, changes: Mapping[str, Any]) -> Product | None:
        """Merge the given fields into a product; None if the id is unknown."""

    @abstractmethod
    async def exists(self, product_id: str) -> bool:
        """True if a product with this id is stored."""


class DeleteProductRepository(ABC):

    @abstractmethod
    async def delete(self, product_id: str) -> bool:
        """Hard delete. True if a record was removed."""

    @abstractmethod
    async def exists(self, product_id: str) -> bool:
        """True if a product with this id is stored."""


class StatsRepository(ABC):

    @abstractmethod
    async def count(self) -> int:
        """Number of stored products."""

    @abstractmethod
    async def get_average_price(self) -> float:
        """Arithmetic mean of prices, 0 when empty."""

    @abstractmethod
    async def get_category_stats(self) -> dict[str, int]:
        """Product count per category."""

    @abstractmethod
    async def get_price_statistics(self) -> PriceStatistics:
        """min/max/average/median over the current set, rounded to cents."""

    async def get_catalog_stats(self) -> CatalogStats:
        """
        Every figure above in one call. This default issues one read per
        figure, so a concurrent write can land between them; backends that
        can read a consistent view of the whole set override it.
        """
        return CatalogStats(
            total_products=await self.count(),
            average_price=await self.get_average_price(),
            price_stats=await self.get_price_statistics(),
            category_counts=await self.get_category_stats(),
        )


class ProductRepository(
    CreateProductRepository,
    ReadProductRepository,
    UpdateProductRepository,
    DeleteProductRepository,
    StatsRepository,
):
    """A backend satisfying every capability, plus bulk replacement."""

    @abstractmethod
    async def replace_all(self, products: Sequence[Product]) -> tuple[int, int]:
        """Drop every stored product and store these. Returns (deleted, inserted)."""
