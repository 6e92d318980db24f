# catalog/domain/repositories/mongo_product_repo.py

from __future__ import annotations

import asyncio
import logging
import re
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import PyMongoError

from catalog.domain.exceptions import BackendFailure
from catalog.domain.models.product import MUTABLE_FIELDS, PriceStatistics, Product, ProductCreate
from catalog.domain.repositories.contracts import ProductRepository
from catalog.domain.services.product_query import median

logger = logging.getLogger(__name__)

_NO_MONGO_ID = {"_id": 0}


@contextmanager
def _backend_call(operation: str):
    """Turn driver errors (timeouts, lost connections, rejected writes) into BackendFailure."""
    try:
        yield
    except PyMongoError as e:
        logger.error("mongo_repo %s failed: %s", operation, e)
        raise BackendFailure(operation, e) from e


# ASCII decimal without leading zeros, the only form the repositories issue
_CANONICAL_ID = re.compile(r"0|[1-9][0-9]*")


def _key(product_id: str) -> Optional[int]:
    """Logical ids are stored as integers; only the canonical string form can match."""
    s = str(product_id)
    return int(s) if _CANONICAL_ID.fullmatch(s) else None


def _to_product(doc: Dict[str, Any]) -> Product:
    data = {k: v for k, v in doc.items() if k != "_id"}
    data["id"] = str(data["id"])
    return Product.model_validate(data)


def _to_document(product: Product) -> Dict[str, Any]:
    doc = product.model_dump(mode="json", by_alias=True)
    doc["id"] = _key(product.id)
    return doc


def _ci_exact(value: str) -> "re.Pattern[str]":
    return re.compile(f"^{re.escape(value.strip())}$", re.IGNORECASE)


def _ci_contains(value: str) -> "re.Pattern[str]":
    return re.compile(re.escape(value.strip()), re.IGNORECASE)


class MongoProductRepository(ProductRepository):
    """
    Product repository backed by a Mongo collection (default 'products').
    Documents are keyed by the logical integer field `id`, never by `_id`;
    `createdAt` is stored as an ISO-8601 string.
    Statistics run as server-side aggregations, the median excepted:
    prices are pushed into one array and the median is taken here.
    """

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str = "products"):
        self.col = db[collection_name]
        # serializes "read max id, insert max+1" within this process
        self._id_lock = asyncio.Lock()

    async def ensure_indexes(self) -> None:
        with _backend_call("ensure_indexes"):
            await self.col.create_index([("id", ASCENDING)], unique=True)

    async def _find(self, filt: Dict[str, Any], sort: List[tuple]) -> list[Product]:
        cursor = self.col.find(filt, _NO_MONGO_ID, sort=sort)
        return [_to_product(doc) async for doc in cursor]

    async def _next_id(self) -> int:
        last = await self.col.find_one({}, {"id": 1, "_id": 0}, sort=[("id", DESCENDING)])
        return int(last["id"]) + 1 if last else 1

    # ----- Create ------------------------------------------------------------

    async def create(self, data: ProductCreate) -> Product:
        with _backend_call("create"):
            async with self._id_lock:
                product = Product(
                    **data.model_dump(),
                    id=str(await self._next_id()),
                    created_at=datetime.now(timezone.utc),
                )
                await self.col.insert_one(_to_document(product))
        logger.info("mongo_repo create id=%s name=%r", product.id, product.name)
        return product

    # ----- Read --------------------------------------------------------------

    async def find_all(self) -> list[Product]:
        with _backend_call("find_all"):
            return await self._find({}, [("createdAt", DESCENDING)])

    async def find_by_id(self, product_id: str) -> Product | None:
        key = _key(product_id)
        if key is None:
            return None
        with _backend_call("find_by_id"):
            doc = await self.col.find_one({"id": key}, _NO_MONGO_ID)
        return _to_product(doc) if doc else None

    async def find_by_category(self, category: str) -> list[Product]:
        with _backend_call("find_by_category"):
            return await self._find({"category": _ci_exact(category)}, [("createdAt", DESCENDING)])

    async def search(self, text: str) -> list[Product]:
        # name + description only, same contract as the in-memory backend
        pattern = _ci_contains(text)
        with _backend_call("search"):
            return await self._find(
                {"$or": [{"name": pattern}, {"description": pattern}]},
                [("createdAt", DESCENDING)],
            )

    async def find_by_price_range(self, min_price: float, max_price: float) -> list[Product]:
        with _backend_call("find_by_price_range"):
            return await self._find({"price": {"$gte": min_price, "$lte": max_price}}, [("price", ASCENDING)])

    async def find_in_stock(self) -> list[Product]:
        with _backend_call("find_in_stock"):
            return await self._find({"stock": {"$gt": 0}}, [("createdAt", DESCENDING)])

    async def get_categories(self) -> list[str]:
        with _backend_call("get_categories"):
            categories = await self.col.distinct("category")
        return sorted(categories)

    # ----- Update ------------------------------------------------------------

    async def update(self, product_id: str, changes: Mapping[str, Any]) -> Product | None:
        key = _key(product_id)
        if key is None:
            return None
        patch = {k: v for k, v in changes.items() if k in MUTABLE_FIELDS}
        if not patch:
            # $set with an empty document is rejected by the server
            return await self.find_by_id(product_id)
        with _backend_call("update"):
            doc = await self.col.find_one_and_update(
                {"id": key},
                {"$set": patch},
                projection=_NO_MONGO_ID,
                return_document=ReturnDocument.AFTER,
            )
        if doc:
            logger.info("mongo_repo update id=%s fields=%s", product_id, sorted(patch))
        return _to_product(doc) if doc else None

    async def exists(self, product_id: str) -> bool:
        key = _key(product_id)
        if key is None:
            return False
        with _backend_call("exists"):
            doc = await self.col.find_one({"id": key}, {"_id": 1})
        return doc is not None

    # ----- Delete ------------------------------------------------------------

    async def delete(self, product_id: str) -> bool:
        key = _key(product_id)
        if key is None:
            return False
        with _backend_call("delete"):
            res = await self.col.delete_one({"id": key})
        if res.deleted_count:
            logger.info("mongo_repo delete id=%s", product_id)
        return res.deleted_count == 1

    async def replace_all(self, products: Sequence[Product]) -> tuple[int, int]:
        docs = [_to_document(p) for p in products]
        with _backend_call("replace_all"):
            deleted = (await self.col.delete_many({})).deleted_count or 0
            inserted = len((await self.col.insert_many(docs)).inserted_ids) if docs else 0
        logger.info("mongo_repo replace_all deleted=%s inserted=%s", deleted, inserted)
        return deleted, inserted

    # ----- Stats -------------------------------------------------------------

    async def _aggregate(self, operation: str, pipeline: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        with _backend_call(operation):
            return [doc async for doc in self.col.aggregate(pipeline)]

    async def count(self) -> int:
        with _backend_call("count"):
            return await self.col.count_documents({})

    async def get_average_price(self) -> float:
        rows = await self._aggregate("get_average_price", [
            {"$group": {"_id": None, "avgPrice": {"$avg": "$price"}}},
        ])
        return rows[0]["avgPrice"] if rows and rows[0].get("avgPrice") is not None else 0

    async def get_category_stats(self) -> dict[str, int]:
        rows = await self._aggregate("get_category_stats", [
            {"$group": {"_id": "$category", "count": {"$sum": 1}}},
            {"$project": {"_id": 0, "category": "$_id", "count": 1}},
        ])
        return {row["category"]: row["count"] for row in rows}

    async def get_price_statistics(self) -> PriceStatistics:
        rows = await self._aggregate("get_price_statistics", [
            {"$group": {
                "_id": None,
                "min": {"$min": "$price"},
                "max": {"$max": "$price"},
                "average": {"$avg": "$price"},
                "prices": {"$push": "$price"},
            }},
        ])
        if not rows or not rows[0].get("prices"):
            return PriceStatistics()
        row = rows[0]
        prices = sorted(row["prices"])
        stats = PriceStatistics(
            min=row["min"],
            max=row["max"],
            average=min(max(row["average"], row["min"]), row["max"]),
            median=median(prices),
        )
        return stats.rounded()
