# catalog/api/errors.py
import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalog.domain.exceptions import BackendFailure, SeedInProgressError, SeedingUnavailableError
from catalog.domain.models.product import MUTABLE_FIELDS

logger = logging.getLogger(__name__)


def _envelope(status_code: int, message: str, *, error: Optional[str] = None, errors: Optional[List[str]] = None) -> JSONResponse:
    body: Dict[str, Any] = {"success": False, "message": message}
    if error is not None:
        body["error"] = error
    if errors is not None:
        body["errors"] = errors
    return JSONResponse(status_code=status_code, content=body)


def describe_validation_errors(raw_errors) -> List[str]:
    """One human-readable reason per offending field, in pydantic's order."""
    reasons: List[str] = []
    for err in raw_errors:
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        field = ".".join(loc) or "body"
        if err.get("type") == "extra_forbidden":
            reasons.append(f"Invalid field: {field}. Allowed fields: {', '.join(MUTABLE_FIELDS)}")
        else:
            reasons.append(f"{field}: {err.get('msg')}")
    return reasons


async def _on_validation_error(request: Request, exc: RequestValidationError):
    reasons = describe_validation_errors(exc.errors())
    logger.info("Rejected %s %s: %s", request.method, request.url.path, reasons)
    return _envelope(400, "; ".join(reasons), errors=reasons)


async def _on_http_error(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    if exc.status_code == 404 and exc.detail == "Not Found":
        message = "Route not found"
    return _envelope(exc.status_code, message)


async def _on_backend_failure(request: Request, exc: BackendFailure):
    logger.error("Backend failure on %s %s: %s", request.method, request.url.path, exc)
    return _envelope(503, "Storage backend unavailable", error=str(exc.cause or exc))


async def _on_seeding_unavailable(request: Request, exc: SeedingUnavailableError):
    return _envelope(400, str(exc))


async def _on_seed_in_progress(request: Request, exc: SeedInProgressError):
    return _envelope(409, str(exc))


async def _on_unexpected(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _envelope(500, "Internal server error", error=str(exc))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, _on_validation_error)
    app.add_exception_handler(StarletteHTTPException, _on_http_error)
    app.add_exception_handler(BackendFailure, _on_backend_failure)
    app.add_exception_handler(SeedingUnavailableError, _on_seeding_unavailable)
    app.add_exception_handler(SeedInProgressError, _on_seed_in_progress)
    app.add_exception_handler(Exception, _on_unexpected)
