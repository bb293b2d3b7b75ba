"""Prediction cache: one current prediction per match."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from predcache.exceptions import (
    PredictionNotFoundError,
    PredictionValidationError,
    Violation,
)
from predcache.models import Category, Prediction, Sport
from predcache.models.base import utcnow
from predcache.repositories import PredictionRepository
from predcache.schemas import PredictionCreate
from predcache.services.classifier import classify

logger = structlog.get_logger(__name__)

# Contractual list order: most confident first, then soonest kickoff.
# match_id only makes equal rows come back in a fixed order.
RANK_ORDER = (
    Prediction.confidence.desc(),
    Prediction.fixture_date.asc(),
    Prediction.match_id.asc(),
)


@dataclass
class CacheStats:
    """Freshness summary of the cache."""

    total: int
    stale: int
    by_category: dict[str, int] = field(default_factory=dict)

    @property
    def fresh(self) -> int:
        return self.total - self.stale


def is_stale(
    record: Prediction, max_age: timedelta, now: datetime | None = None
) -> bool:
    """Whether the record was last written longer than max_age ago."""
    now = now or utcnow()
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    last_updated = record.last_updated
    if last_updated.tzinfo is None:
        last_updated = last_updated.replace(tzinfo=timezone.utc)
    return now - last_updated > max_age


class PredictionCacheService:
    """Upserts, ranked listing, eviction and staleness checks.

    Store errors propagate as StoreUnavailableError and validation errors
    as PredictionValidationError. Nothing here retries or expires records
    on its own.
    """

    def __init__(self, session: AsyncSession, timeout: float | None = None):
        self.session = session
        self.prediction_repo = PredictionRepository(session, timeout)

    async def upsert(
        self,
        raw: Any,
        *,
        reclassify: bool = False,
        timeout: float | None = None,
    ) -> Prediction:
        """Validate a payload and store it as the match's current prediction."""
        category, errors, prediction = classify(raw)
        if errors:
            logger.info(
                "prediction_rejected",
                match_id=_peek_match_id(raw),
                violations=[str(v) for v in errors],
            )
            raise PredictionValidationError(errors)

        stored = await self.prediction_repo.put(
            prediction.match_id,
            self._to_record(prediction),
            timeout,
            keep_category=not reclassify,
        )
        if stored.category != category.value:
            violation = Violation(
                "category",
                f"Cannot change category from '{stored.category}' to "
                f"'{category.value}' without reclassification",
            )
            logger.info(
                "prediction_rejected",
                match_id=prediction.match_id,
                violations=[str(violation)],
            )
            raise PredictionValidationError([violation])

        logger.info(
            "prediction_upserted",
            match_id=stored.match_id,
            category=stored.category,
            confidence=stored.confidence,
        )
        return stored

    async def reclassify(
        self, match_id: int, category: Category, *, timeout: float | None = None
    ) -> Prediction:
        """Change only the category of a stored prediction."""
        stored = await self.prediction_repo.set_category(
            match_id, Category(category).value, timeout
        )
        if stored is None:
            raise PredictionNotFoundError(match_id)

        logger.info("prediction_reclassified", match_id=match_id, category=stored.category)
        return stored

    async def list_by_category(
        self,
        category: Category,
        sport: Sport | None = None,
        *,
        timeout: float | None = None,
    ) -> list[Prediction]:
        """Records in a category, best-ranked first."""
        criteria = [Prediction.category == Category(category).value]
        if sport is not None:
            criteria.append(Prediction.sport == Sport(sport).value)
        return await self._collect(criteria, timeout)

    async def list_all(
        self, sport: Sport | None = None, *, timeout: float | None = None
    ) -> list[Prediction]:
        """Every record, best-ranked first."""
        criteria = []
        if sport is not None:
            criteria.append(Prediction.sport == Sport(sport).value)
        return await self._collect(criteria, timeout)

    async def get_by_id(
        self, match_id: int, *, timeout: float | None = None
    ) -> Prediction | None:
        """Current prediction for a match, or None."""
        return await self.prediction_repo.get(match_id, timeout)

    async def evict(self, match_id: int, *, timeout: float | None = None) -> bool:
        """Remove a match's prediction. False if there was none."""
        evicted = await self.prediction_repo.delete(match_id, timeout)
        logger.info("prediction_evicted", match_id=match_id, found=evicted)
        return evicted

    async def purge_finished(
        self, before: datetime, *, timeout: float | None = None
    ) -> int:
        """Evict every prediction whose kickoff is earlier than `before`."""
        if before.tzinfo is None:
            before = before.replace(tzinfo=timezone.utc)
        purged = await self.prediction_repo.delete_where(
            Prediction.fixture_date < before, timeout=timeout
        )
        logger.info("predictions_purged", before=before.isoformat(), count=purged)
        return purged

    def is_stale(
        self, record: Prediction, max_age: timedelta, now: datetime | None = None
    ) -> bool:
        """Informational only; stale records are never removed here."""
        return is_stale(record, max_age, now)

    async def list_stale(
        self, max_age: timedelta, *, timeout: float | None = None
    ) -> list[Prediction]:
        """Records older than max_age, oldest first."""
        cutoff = utcnow() - max_age
        return [
            record
            async for record in self.prediction_repo.scan(
                Prediction.last_updated < cutoff,
                order_by=(Prediction.last_updated.asc(),),
                timeout=timeout,
            )
        ]

    async def stats(
        self, max_age: timedelta, *, timeout: float | None = None
    ) -> CacheStats:
        """Counts of total, stale and per-category records."""
        cutoff = utcnow() - max_age
        total = await self.prediction_repo.count(timeout=timeout)
        stale = await self.prediction_repo.count(
            Prediction.last_updated < cutoff, timeout=timeout
        )
        by_category = await self.prediction_repo.count_by_category(timeout)
        return CacheStats(
            total=total,
            stale=stale,
            by_category={c.value: by_category.get(c.value, 0) for c in Category},
        )

    async def _collect(self, criteria: list, timeout: float | None) -> list[Prediction]:
        return [
            record
            async for record in self.prediction_repo.scan(
                *criteria, order_by=RANK_ORDER, timeout=timeout
            )
        ]

    def _to_record(self, prediction: PredictionCreate) -> dict[str, Any]:
        """Flatten a normalized payload into table columns."""
        return {
            "sport": prediction.sport.value,
            "category": prediction.category.value,
            "tip": prediction.tip,
            "confidence": prediction.confidence,
            "source": prediction.source.value,
            "home_team": prediction.home_team.model_dump(),
            "away_team": prediction.away_team.model_dump(),
            "league": prediction.league.model_dump(),
            "fixture_date": prediction.fixture.date,
            "fixture_time": prediction.fixture.time,
            "reasoning": (
                prediction.reasoning.model_dump() if prediction.reasoning else None
            ),
        }


def _peek_match_id(raw: Any) -> Any:
    if isinstance(raw, Mapping):
        return raw.get("match_id")
    return None
