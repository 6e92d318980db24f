# catalog/api/deps.py
from typing import Annotated

from fastapi import Depends, Request

from catalog.core.config import Settings, get_settings
from catalog.db.redis import get_redis
from catalog.domain.repositories.contracts import (
    CreateProductRepository,
    DeleteProductRepository,
    ProductRepository,
    ReadProductRepository,
    StatsRepository,
    UpdateProductRepository,
)


# The repository built at startup (see core/lifespan.py); one instance per process
def get_product_repository(request: Request) -> ProductRepository:
    return request.app.state.product_repo


# Dependency for injecting the Redis client (None when not configured)
def redis_dep():
    return get_redis()


# Each route asks only for the capability it uses
CreateRepoDep = Annotated[CreateProductRepository, Depends(get_product_repository)]
ReadRepoDep = Annotated[ReadProductRepository, Depends(get_product_repository)]
UpdateRepoDep = Annotated[UpdateProductRepository, Depends(get_product_repository)]
DeleteRepoDep = Annotated[DeleteProductRepository, Depends(get_product_repository)]
StatsRepoDep = Annotated[StatsRepository, Depends(get_product_repository)]
FullRepoDep = Annotated[ProductRepository, Depends(get_product_repository)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
