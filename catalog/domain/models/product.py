from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Fields a caller may patch; id and createdAt belong to the repository
MUTABLE_FIELDS = ("name", "description", "price", "category", "image", "stock", "rating")


class Product(BaseModel):
    id: str
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    price: float = Field(gt=0)
    category: str = Field(min_length=1)
    image: str = Field(min_length=1)
    stock: int = Field(ge=0)
    rating: float = Field(ge=0, le=5)
    created_at: datetime = Field(alias="createdAt")

    model_config = ConfigDict(frozen=True, populate_by_name=True)  # immuable = safe to hand out

    @property
    def available(self) -> bool:
        return self.stock > 0


class ProductCreate(BaseModel):
    """Payload of a creation request: every Product field except id/createdAt."""

    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    price: float = Field(gt=0)
    category: str = Field(min_length=1)
    image: str = Field(min_length=1)
    stock: int = Field(ge=0)
    rating: float = Field(ge=0, le=5)

    model_config = ConfigDict(strict=True, extra="forbid", str_strip_whitespace=True)


class ProductUpdate(BaseModel):
    """Partial patch. Unknown keys are rejected, explicit nulls too."""

    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    price: Optional[float] = Field(default=None, gt=0)
    category: Optional[str] = Field(default=None, min_length=1)
    image: Optional[str] = Field(default=None, min_length=1)
    stock: Optional[int] = Field(default=None, ge=0)
    rating: Optional[float] = Field(default=None, ge=0, le=5)

    model_config = ConfigDict(strict=True, extra="forbid", str_strip_whitespace=True)

    @field_validator(*MUTABLE_FIELDS, mode="before")
    @classmethod
    def _reject_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value

    def changes(self) -> dict:
        """Only the fields the caller actually sent."""
        return self.model_dump(exclude_unset=True)


class PriceStatistics(BaseModel):
    min: float = 0
    max: float = 0
    average: float = 0
    median: float = 0

    model_config = {"frozen": True}

    def rounded(self, ndigits: int = 2) -> "PriceStatistics":
        return PriceStatistics(
            min=round(self.min, ndigits),
            max=round(self.max, ndigits),
            average=round(self.average, ndigits),
            median=round(self.median, ndigits),
        )


class ProductPage(BaseModel):
    items: List[Product]
    count: int          # matches before pagination
    page: int
    limit: int
    total_pages: int

    model_config = {"frozen": True}


class CatalogStats(BaseModel):
    """Every catalog figure read from one view of the product set."""

    total_products: int = 0
    average_price: float = 0        # unrounded
    price_stats: PriceStatistics = PriceStatistics()
    category_counts: Dict[str, int] = {}

    model_config = {"frozen": True}
