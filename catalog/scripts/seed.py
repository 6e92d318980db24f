#!/usr/bin/env python
"""
Re-seed the Mongo products collection from the canonical dataset.

    REPOSITORY_BACKEND=mongo MONGO_URI=... python -m catalog.scripts.seed
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from pymongo.errors import PyMongoError

from catalog.core.config import get_settings
from catalog.core.logging import configure_logging
from catalog.db import mongo, redis as r
from catalog.domain.exceptions import CatalogError
from catalog.domain.repositories.mongo_product_repo import MongoProductRepository
from catalog.domain.services.seed_svc import reseed_catalog_svc

logger = logging.getLogger("catalog.scripts.seed")


async def seed() -> dict:
    settings = get_settings()
    db = await mongo.connect()
    await r.connect()
    try:
        repo = MongoProductRepository(db, collection_name=settings.MONGO_COLLECTION)
        await repo.ensure_indexes()
        return await reseed_catalog_svc(repo, settings, r.get_redis())
    finally:
        await r.disconnect()
        await mongo.disconnect()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    args = parser.parse_args(argv)
    configure_logging(level=logging.DEBUG if args.debug else logging.INFO)

    try:
        result = asyncio.run(seed())
    except (CatalogError, PyMongoError) as e:
        logger.error("Seeding failed: %s", e)
        return 1

    logger.info("Cleared %s existing products, inserted %s", result["deleted"], result["inserted"])
    for category, count in sorted(result["categories"].items()):
        logger.info("  %s: %s products", category, count)
    return 0


if __name__ == "__main__":
    sys.exit(main())
