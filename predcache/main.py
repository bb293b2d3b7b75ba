"""FastAPI application entry point."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from predcache.api import predictions_router, register_exception_handlers
from predcache.config import get_settings
from predcache.database import init_db
from predcache.logging_config import configure_logging

settings = get_settings()

configure_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    await init_db()
    logger.info("startup", app=settings.app_name, version=settings.app_version)
    yield
    logger.info("shutdown")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Sports prediction cache with tiered access",
    lifespan=lifespan,
)

register_exception_handlers(app)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "running",
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


app.include_router(predictions_router, prefix="/api")
