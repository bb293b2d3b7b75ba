"""SQLAlchemy models."""

from predcache.models.prediction import Category, Prediction, Source, Sport

__all__ = [
    "Prediction",
    "Sport",
    "Category",
    "Source",
]
