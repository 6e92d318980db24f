import logging
import time
from collections import Counter
from typing import Any, Dict, Optional, Sequence

from redis.asyncio import Redis

from catalog.core.config import Settings
from catalog.domain.exceptions import SeedInProgressError, SeedingUnavailableError
from catalog.domain.models.product import Product
from catalog.domain.repositories.contracts import ProductRepository
from catalog.domain.seed_data import seed_products
from catalog.utils.locks import RedisLock

logger = logging.getLogger(__name__)

SEED_LOCK_KEY = "catalog:seed"


async def _replace(repo: ProductRepository, products: Sequence[Product]) -> Dict[str, Any]:
    deleted, inserted = await repo.replace_all(products)
    return {
        "deleted": deleted,
        "inserted": inserted,
        "categories": dict(Counter(p.category for p in products)),
    }


async def reseed_catalog_svc(
    repo: ProductRepository,
    settings: Settings,
    redis: Optional[Redis] = None,
    products: Optional[Sequence[Product]] = None,
) -> Dict[str, Any]:
    """
    Replace the whole Mongo collection with the canonical dataset.
    Refused unless the mongo backend is configured. With Redis available the
    replace runs under a cross-worker lock; a concurrent reseed gets
    SeedInProgressError instead of interleaving delete/insert batches.
    """
    if settings.REPOSITORY_BACKEND != "mongo":
        raise SeedingUnavailableError(
            "Seeding is only available when REPOSITORY_BACKEND=mongo (Mongo repository)"
        )

    products = list(products) if products is not None else seed_products()
    t0 = time.perf_counter()
    logger.info("reseed start products=%s lock=%s", len(products), redis is not None)

    if redis is None:
        result = await _replace(repo, products)
    else:
        async with RedisLock(redis, SEED_LOCK_KEY, ttl=settings.seed_lock_ttl) as lock:
            if not lock.acquired:
                logger.warning("reseed refused: lock %s is held", SEED_LOCK_KEY)
                raise SeedInProgressError("A reseed is already running")
            result = await _replace(repo, products)

    logger.info(
        "reseed done deleted=%s inserted=%s time=%.3fs",
        result["deleted"], result["inserted"], time.perf_counter() - t0,
    )
    return result
