"""Mapping of cache errors to HTTP responses."""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from predcache.exceptions import (
    AccessDeniedError,
    PredictionNotFoundError,
    PredictionValidationError,
    StoreUnavailableError,
)
from predcache.schemas import ViolationResponse

logger = structlog.get_logger(__name__)


async def validation_error_handler(request: Request, exc: PredictionValidationError):
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Invalid prediction",
            "violations": [
                ViolationResponse(field=v.field, message=v.message).model_dump()
                for v in exc.violations
            ],
        },
    )


async def not_found_handler(request: Request, exc: PredictionNotFoundError):
    return JSONResponse(status_code=404, content={"detail": "Prediction not found"})


async def access_denied_handler(request: Request, exc: AccessDeniedError):
    # Says which category is gated, nothing about the record itself.
    return JSONResponse(
        status_code=403,
        content={"detail": "Upgrade required", "category": exc.category},
    )


async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
    logger.error("store_unavailable", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=503,
        content={"detail": "Prediction store unavailable"},
        headers={"Retry-After": "5"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers on the app."""
    app.add_exception_handler(PredictionValidationError, validation_error_handler)
    app.add_exception_handler(PredictionNotFoundError, not_found_handler)
    app.add_exception_handler(AccessDeniedError, access_denied_handler)
    app.add_exception_handler(StoreUnavailableError, store_unavailable_handler)
