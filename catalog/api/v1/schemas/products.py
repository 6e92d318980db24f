# catalog/api/v1/schemas/products.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional

from catalog.domain.models.product import PriceStatistics, Product


class ProductEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: Product


class ProductListEnvelope(BaseModel):
    success: bool = True
    count: int
    data: List[Product]


class ProductPageEnvelope(BaseModel):
    success: bool = True
    count: int
    page: int
    limit: int
    total_pages: int = Field(alias="totalPages")
    data: List[Product]

    model_config = ConfigDict(populate_by_name=True)


class MessageEnvelope(BaseModel):
    success: bool = True
    message: str


class CatalogStatsOut(BaseModel):
    total_products: int = Field(alias="totalProducts")
    average_price: float = Field(alias="averagePrice")
    price_stats: PriceStatistics = Field(alias="priceStats")
    categories: List[str]
    category_counts: Dict[str, int] = Field(alias="categoryCounts")


class StatsEnvelope(BaseModel):
    success: bool = True
    data: CatalogStatsOut


class SeedEnvelope(BaseModel):
    success: bool = True
    message: str
    deleted: int
    inserted: int
    categories: Dict[str, int]


class ErrorEnvelope(BaseModel):
    success: bool = False
    message: str
    error: Optional[str] = None
    errors: Optional[List[str]] = None
