# catalog/core/lifespan.py
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from catalog.db import mongo, redis as r
from catalog.core.config import get_settings
from catalog.domain.repositories.factory import build_product_repository
from catalog.domain.repositories.mongo_product_repo import MongoProductRepository

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()

    # --- Startup ---
    # Mongo is mandatory with the mongo backend, never touched otherwise
    db = None
    if settings.REPOSITORY_BACKEND == "mongo":
        db = await mongo.connect()

    # Redis optional (seed lock only)
    await r.connect()

    repo = build_product_repository(settings, db)
    if isinstance(repo, MongoProductRepository):
        await repo.ensure_indexes()
    app.state.product_repo = repo
    logger.info("%s ready backend=%s env=%s", settings.APP_NAME, settings.REPOSITORY_BACKEND, settings.APP_ENV)

    # Application runs
    yield

    # --- Shutdown ---
    await r.disconnect()
    await mongo.disconnect()
