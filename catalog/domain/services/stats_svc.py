import logging
import time
from typing import Any, Dict

from catalog.domain.repositories.contracts import StatsRepository

logger = logging.getLogger(__name__)


async def get_catalog_stats_svc(stats_repo: StatsRepository) -> Dict[str, Any]:
    """Totals, price statistics and categories, recomputed on every call."""
    t0 = time.perf_counter()

    stats = await stats_repo.get_catalog_stats()
    categories = sorted(stats.category_counts)

    logger.info(
        "catalog_stats total=%s categories=%s time=%.3fs",
        stats.total_products, len(categories), time.perf_counter() - t0,
    )
    return {
        "totalProducts": stats.total_products,
        "averagePrice": round(stats.average_price, 2),
        "priceStats": stats.price_stats.model_dump(),
        "categories": categories,
        "categoryCounts": stats.category_counts,
    }
