"""Viewer-tier visibility rules.

This is the only place that decides whether a viewer may see a
prediction. List and detail views both go through it.
"""

import enum
from collections.abc import Iterable
from typing import Protocol, TypeVar

import structlog

from predcache.exceptions import AccessDeniedError
from predcache.models import Category
from predcache.schemas import ViewerTierEnum

logger = structlog.get_logger(__name__)


class Visibility(str, enum.Enum):
    """What a viewer gets for a record."""

    FULL = "full"
    NONE = "none"


class Gated(Protocol):
    match_id: int
    category: str


R = TypeVar("R", bound=Gated)

_FULL_ONLY_FOR_VIP = {
    ViewerTierEnum.ANONYMOUS: Visibility.NONE,
    ViewerTierEnum.AUTHENTICATED: Visibility.NONE,
    ViewerTierEnum.VIP: Visibility.FULL,
}
_FULL_FOR_ALL = {tier: Visibility.FULL for tier in ViewerTierEnum}

VISIBILITY_RULES: dict[Category, dict[ViewerTierEnum, Visibility]] = {
    Category.BANKER: _FULL_FOR_ALL,
    Category.SURPRISE: _FULL_FOR_ALL,
    Category.VIP: _FULL_ONLY_FOR_VIP,
}


class AccessGate:
    """Applies the category x viewer-tier table."""

    def __init__(self, rules: dict[Category, dict[ViewerTierEnum, Visibility]] | None = None):
        self.rules = rules or VISIBILITY_RULES

    def visibility(self, category: Category | str, tier: ViewerTierEnum | str) -> Visibility:
        # Unknown categories are withheld rather than shown.
        try:
            return self.rules[Category(category)][ViewerTierEnum(tier)]
        except (KeyError, ValueError):
            return Visibility.NONE

    def visible_categories(self, tier: ViewerTierEnum | str) -> list[Category]:
        """Categories the tier may see in full."""
        return [c for c in self.rules if self.visibility(c, tier) is Visibility.FULL]

    def filter(self, records: Iterable[R], tier: ViewerTierEnum | str) -> list[R]:
        """Drop records the tier may not see, keeping the order of the rest."""
        return [
            r for r in records if self.visibility(r.category, tier) is Visibility.FULL
        ]

    def authorize(self, record: R, tier: ViewerTierEnum | str) -> R:
        """Return the record if visible, else raise AccessDeniedError."""
        if self.visibility(record.category, tier) is Visibility.FULL:
            return record

        logger.info(
            "prediction_access_denied",
            match_id=record.match_id,
            category=record.category,
            viewer_tier=getattr(tier, "value", tier),
        )
        raise AccessDeniedError(record.match_id, record.category)
