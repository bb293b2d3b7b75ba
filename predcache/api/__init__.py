"""API routers."""

from predcache.api.errors import register_exception_handlers
from predcache.api.predictions import router as predictions_router

__all__ = [
    "predictions_router",
    "register_exception_handlers",
]
