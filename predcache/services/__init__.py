"""Business logic services."""

from predcache.services.access_gate import AccessGate, Visibility
from predcache.services.cache_service import CacheStats, PredictionCacheService
from predcache.services.classifier import Classification, classify
from predcache.services.query_service import PredictionQueryService

__all__ = [
    "AccessGate",
    "Visibility",
    "CacheStats",
    "Classification",
    "classify",
    "PredictionCacheService",
    "PredictionQueryService",
]
