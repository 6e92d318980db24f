# catalog/domain/repositories/factory.py
import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from catalog.core.config import Settings
from catalog.domain.repositories.contracts import ProductRepository
from catalog.domain.repositories.memory_product_repo import InMemoryProductRepository
from catalog.domain.repositories.mongo_product_repo import MongoProductRepository
from catalog.domain.seed_data import seed_products

logger = logging.getLogger(__name__)


def build_product_repository(settings: Settings, db: Optional[AsyncIOMotorDatabase] = None) -> ProductRepository:
    """Pick the storage backend named by REPOSITORY_BACKEND."""
    if settings.REPOSITORY_BACKEND == "mongo":
        if db is None:
            raise ValueError("REPOSITORY_BACKEND=mongo requires a connected database")
        logger.info("Using Mongo product repository collection=%s", settings.MONGO_COLLECTION)
        return MongoProductRepository(db, collection_name=settings.MONGO_COLLECTION)

    products = seed_products()
    logger.info("Using in-memory product repository (%s seed products)", len(products))
    return InMemoryProductRepository(products, latency=settings.memory_latency_s)
