"""Data access repositories."""

from predcache.repositories.base import BaseRepository
from predcache.repositories.locks import KeyedLock
from predcache.repositories.prediction_repository import PredictionRepository

__all__ = [
    "BaseRepository",
    "KeyedLock",
    "PredictionRepository",
]
