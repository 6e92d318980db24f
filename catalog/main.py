from fastapi import FastAPI
from catalog.core.config import get_settings
from catalog.core.lifespan import lifespan
from catalog.api.errors import register_exception_handlers
from catalog.api.v1.routers.products import router as products_router
from catalog.api.v1.routers.health import router as health_router
from catalog.core.logging import configure_logging

from fastapi.middleware.cors import CORSMiddleware
import logging

settings = get_settings()
configure_logging(level=logging.DEBUG if settings.DEBUG else logging.INFO)

app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# ------- CORS -------
# ALLOWED_ORIGINS is a CSV, e.g. "https://shop.example.com,http://localhost:3000".
# Unset means any origin, without credentials (the catalog is public and read-mostly).
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins or ["*"],
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    max_age=86400,
)

register_exception_handlers(app)

# ------- Routes -------
app.include_router(health_router)
app.include_router(products_router, prefix=settings.api_prefix)   # /api/products CRUD, queries, stats, seed
