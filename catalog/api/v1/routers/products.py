# catalog/api/v1/routers/products.py

from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional
import time

from catalog.api.deps import (
    CreateRepoDep,
    DeleteRepoDep,
    FullRepoDep,
    ReadRepoDep,
    SettingsDep,
    StatsRepoDep,
    UpdateRepoDep,
    redis_dep,
)
from catalog.api.v1.schemas.products import (
    ErrorEnvelope,
    MessageEnvelope,
    ProductEnvelope,
    ProductListEnvelope,
    ProductPageEnvelope,
    SeedEnvelope,
    StatsEnvelope,
)
from catalog.domain.models.product import ProductCreate, ProductUpdate
from catalog.domain.services.product_query import (
    ProductQuery,
    cheapest_in_category,
    parse_int_prefix,
    query_products,
    top_cheapest_available,
)
from catalog.domain.services.seed_svc import reseed_catalog_svc
from catalog.domain.services.stats_svc import get_catalog_stats_svc

import logging
logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/products",
    tags=["products"],
    responses={code: {"model": ErrorEnvelope} for code in (400, 404, 503)},
)

NOT_FOUND = "Product not found"


def _top_n(raw_limit: Optional[str], default: int, ceiling: int) -> int:
    """Honour ?limit= only inside 1..ceiling, otherwise use the endpoint default."""
    parsed = parse_int_prefix(raw_limit)
    return parsed if parsed is not None and 0 < parsed <= ceiling else default


@router.get("", response_model=ProductPageEnvelope, summary="List products with filters, sorting and pagination")
async def list_products(
    repo: ReadRepoDep,
    settings: SettingsDep,
    category: Optional[str] = Query(None, description="Exact category, case-insensitive"),
    search: Optional[str] = Query(None, description="Substring of name or description"),
    max_price: Optional[str] = Query(None, alias="maxPrice", description="Keep price <= maxPrice"),
    available: Optional[str] = Query(None, description="'true' = in stock, 'false' = sold out"),
    sort: Optional[str] = Query(None, description="'price' or 'name'"),
    order: Optional[str] = Query(None, description="'asc' (default) or 'desc'"),
    page: Optional[str] = Query(None, description="1-based page number"),
    limit: Optional[str] = Query(None, description="Page size (default 10)"),
):
    # Parameters stay raw strings: bad values fall back to defaults rather than 422
    query = ProductQuery(
        category=category, search=search, max_price=max_price, available=available,
        sort=sort, order=order, page=page, limit=limit,
    )
    logger.info("Request: list_products query=%s", query)
    t0 = time.perf_counter()

    products = await repo.find_all()
    result = query_products(products, query, max_page_size=settings.max_page_size)

    logger.info(
        "Response: list_products count=%s page=%s/%s returned=%s in %.4fs",
        result.count, result.page, result.total_pages, len(result.items), time.perf_counter() - t0,
    )
    return ProductPageEnvelope(
        count=result.count,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
        data=result.items,
    )


@router.post("", status_code=201, response_model=ProductEnvelope, summary="Create a product")
async def create_product(payload: ProductCreate, repo: CreateRepoDep):
    product = await repo.create(payload)
    logger.info("Response: create_product id=%s", product.id)
    return ProductEnvelope(message="Product created successfully", data=product)


@router.get("/cheapest", response_model=ProductListEnvelope, summary="Cheapest products in stock")
async def get_cheapest_products(
    repo: ReadRepoDep,
    settings: SettingsDep,
    limit: Optional[str] = Query(None, description="1..50, default 5"),
):
    n = _top_n(limit, settings.cheapest_default_limit, settings.cheapest_max_limit)
    items = top_cheapest_available(await repo.find_all(), n)
    logger.info("Response: get_cheapest_products limit=%s returned=%s", n, len(items))
    return ProductListEnvelope(count=len(items), data=items)


@router.get("/cheapest-available", response_model=ProductListEnvelope, summary="Top N cheapest products with stock")
async def get_cheapest_available(
    repo: ReadRepoDep,
    settings: SettingsDep,
    limit: Optional[str] = Query(None, description="1..50, default 3"),
):
    n = _top_n(limit, settings.cheapest_available_default_limit, settings.cheapest_max_limit)
    items = top_cheapest_available(await repo.find_all(), n)
    logger.info("Response: get_cheapest_available limit=%s returned=%s", n, len(items))
    return ProductListEnvelope(count=len(items), data=items)


@router.get(
    "/categories/{category}/cheapest",
    response_model=ProductEnvelope,
    response_model_exclude_none=True,
    summary="Cheapest product in stock for a category",
)
async def get_cheapest_in_category(category: str, repo: ReadRepoDep):
    product = cheapest_in_category(await repo.find_by_category(category), category)
    if product is None:
        raise HTTPException(status_code=404, detail=f"No available product in category '{category}'")
    return ProductEnvelope(data=product)


@router.get("/stats", response_model=StatsEnvelope, summary="Price and category statistics")
async def get_stats(stats_repo: StatsRepoDep):
    t0 = time.perf_counter()
    stats = await get_catalog_stats_svc(stats_repo)
    logger.info("Response: get_stats total=%s in %.4fs", stats["totalProducts"], time.perf_counter() - t0)
    return {"success": True, "data": stats}


@router.post("/seed", status_code=201, response_model=SeedEnvelope, summary="Re-seed the Mongo collection")
async def run_seed(repo: FullRepoDep, settings: SettingsDep, redis=Depends(redis_dep)):
    result = await reseed_catalog_svc(repo, settings, redis)
    return SeedEnvelope(message="Database seeded successfully", **result)


@router.get("/{product_id}", response_model=ProductEnvelope, response_model_exclude_none=True, summary="Get a product")
async def get_product(product_id: str, repo: ReadRepoDep):
    product = await repo.find_by_id(product_id.strip())
    if product is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return ProductEnvelope(data=product)


@router.put("/{product_id}", response_model=ProductEnvelope, summary="Partially update a product")
async def update_product(product_id: str, payload: ProductUpdate, repo: UpdateRepoDep):
    product_id = product_id.strip()
    if not await repo.exists(product_id):
        raise HTTPException(status_code=404, detail=NOT_FOUND)

    changes = payload.changes()
    logger.info("Request: update_product id=%s fields=%s", product_id, sorted(changes))
    updated = await repo.update(product_id, changes)
    if updated is None:
        # deleted between the existence check and the update
        raise HTTPException(status_code=404, detail="Product not found or could not be updated")
    return ProductEnvelope(message="Product updated successfully", data=updated)


@router.delete("/{product_id}", response_model=MessageEnvelope, summary="Delete a product")
async def delete_product(product_id: str, repo: DeleteRepoDep):
    product_id = product_id.strip()
    if not await repo.exists(product_id):
        raise HTTPException(status_code=404, detail=NOT_FOUND)

    if not await repo.delete(product_id):
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    logger.info("Response: delete_product id=%s", product_id)
    return MessageEnvelope(message="Product deleted successfully")
