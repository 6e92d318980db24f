# catalog/db/mongo.py
import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError
from catalog.core.config import get_settings
import certifi

logger = logging.getLogger(__name__)

_client: AsyncIOMotorClient | None = None
_db: AsyncIOMotorDatabase | None = None


def get_db() -> AsyncIOMotorDatabase:
    assert _db is not None, "Mongo DB not initialized"
    return _db


def _new_client(settings) -> AsyncIOMotorClient:
    options = dict(
        uuidRepresentation="standard",
        serverSelectionTimeoutMS=6000,
        connectTimeoutMS=6000,
    )
    if settings.MONGO_TLS:
        # explicit CA bundle, containers often ship without one
        options.update(tls=True, tlsCAFile=certifi.where())
    return AsyncIOMotorClient(settings.MONGO_URI, **options)


async def connect() -> AsyncIOMotorDatabase:
    """
    Create the Motor client and ping the server.
    A failed ping is fatal: with the mongo backend selected there is nothing
    to fall back to, so startup aborts instead of serving 503s forever.
    """
    global _client, _db
    settings = get_settings()

    _client = _new_client(settings)
    _db = _client[settings.MONGO_DB]
    try:
        await _client.admin.command("ping")
    except PyMongoError as e:
        logger.error("Mongo ping at startup failed uri_db=%s err=%s", settings.MONGO_DB, e)
        await disconnect()
        raise
    logger.info("Mongo connected db=%s", settings.MONGO_DB)
    return _db


async def disconnect():
    global _client, _db
    if _client:
        _client.close()
        logger.info("Mongo disconnected")
    _client = None
    _db = None
