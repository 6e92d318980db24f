# catalog/db/redis.py
import logging

import redis.asyncio as redis
from redis.exceptions import RedisError
from catalog.core.config import get_settings

logger = logging.getLogger(__name__)

redis_client: redis.Redis | None = None


async def connect():
    """
    Connect Redis when REDIS_URL is set.
    Redis only guards reseeding, so an unreachable server is logged and
    the app keeps running without it.
    """
    global redis_client
    settings = get_settings()
    if not settings.REDIS_URL:
        logger.info("No REDIS_URL configured, seed lock disabled")
        redis_client = None
        return

    try:
        redis_client = redis.from_url(settings.REDIS_URL, decode_responses=True)
        await redis_client.ping()
        logger.info("Redis connected")
    except (RedisError, OSError) as e:
        logger.warning("Redis connection failed, seed lock disabled: %s", e)
        redis_client = None


async def disconnect():
    global redis_client
    if redis_client:
        await redis_client.aclose()
        redis_client = None
        logger.info("Redis disconnected")


def get_redis() -> redis.Redis | None:
    """Redis client, or None when not configured or unreachable."""
    return redis_client
