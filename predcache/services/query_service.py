"""Tier-gated, paginated prediction queries."""

import math
from datetime import timedelta

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from predcache.config import get_settings
from predcache.exceptions import PredictionNotFoundError
from predcache.models import Category, Prediction, Sport
from predcache.models.base import utcnow
from predcache.schemas import (
    FixtureResponse,
    LeagueResponse,
    PredictionResponse,
    ReasoningResponse,
    TeamResponse,
    ViewerTierEnum,
)
from predcache.services.access_gate import AccessGate
from predcache.services.cache_service import PredictionCacheService, is_stale

logger = structlog.get_logger(__name__)

TIME_TBD = "TBD"


def page_count(total: int, page_size: int) -> int:
    """Number of pages needed for total items."""
    return math.ceil(total / page_size) if total else 0


class PredictionQueryService:
    """Reads predictions on behalf of a viewer tier.

    Access filtering happens before pagination, so each tier pages
    through its own consistent sequence. Fallback values for missing
    optional fields are filled in here and nowhere else.
    """

    def __init__(
        self,
        session: AsyncSession,
        gate: AccessGate | None = None,
        timeout: float | None = None,
    ):
        self.settings = get_settings()
        self.session = session
        self.cache = PredictionCacheService(session, timeout)
        self.gate = gate or AccessGate()

    def clamp_page_size(self, page_size: int) -> int:
        """Bound page_size to the configured maximum."""
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        return min(page_size, self.settings.max_page_size)

    async def list(
        self,
        category: Category | None,
        sport: Sport | None,
        viewer_tier: ViewerTierEnum,
        page: int = 1,
        page_size: int | None = None,
        include_past: bool = True,
    ) -> tuple[list[PredictionResponse], int]:
        """One page of visible predictions and the total visible count."""
        if page < 1:
            raise ValueError("page must be at least 1")
        if page_size is None:
            page_size = self.settings.default_page_size
        page_size = self.clamp_page_size(page_size)
        viewer_tier = ViewerTierEnum(viewer_tier)
        category = Category(category) if category is not None else None
        sport = Sport(sport) if sport is not None else None

        if category is None:
            records = await self.cache.list_all(sport)
        else:
            records = await self.cache.list_by_category(category, sport)

        if not include_past:
            since = utcnow() - timedelta(hours=self.settings.past_window_hours)
            records = [r for r in records if r.fixture_date >= since]

        visible = self.gate.filter(records, viewer_tier)
        total = len(visible)
        start = (page - 1) * page_size
        items = visible[start : start + page_size]

        logger.debug(
            "predictions_listed",
            category=category.value if category else None,
            sport=sport.value if sport else None,
            viewer_tier=viewer_tier.value,
            page=page,
            page_size=page_size,
            returned=len(items),
            total=total,
            withheld=len(records) - total,
        )
        return [self.to_response(r) for r in items], total

    async def detail(
        self, match_id: int, viewer_tier: ViewerTierEnum
    ) -> PredictionResponse:
        """A single prediction; raises PredictionNotFoundError or AccessDeniedError."""
        record = await self.cache.get_by_id(match_id)
        if record is None:
            raise PredictionNotFoundError(match_id)

        return self.to_response(self.gate.authorize(record, viewer_tier))

    def to_response(self, prediction: Prediction) -> PredictionResponse:
        """Convert Prediction model to PredictionResponse, filling fallbacks."""
        reasoning = prediction.reasoning or {}
        return PredictionResponse(
            match_id=prediction.match_id,
            sport=prediction.sport,
            category=prediction.category,
            tip=prediction.tip,
            confidence=prediction.confidence,
            source=prediction.source,
            home_team=TeamResponse(**prediction.home_team),
            away_team=TeamResponse(**prediction.away_team),
            league=LeagueResponse(**prediction.league),
            fixture=FixtureResponse(
                date=prediction.fixture_date,
                time=prediction.fixture_time or TIME_TBD,
            ),
            reasoning=ReasoningResponse(
                home_form=reasoning.get("home_form") or "",
                away_form=reasoning.get("away_form") or "",
                h2h=reasoning.get("h2h") or "",
                stats=reasoning.get("stats") or {},
            ),
            last_updated=prediction.last_updated,
            is_stale=is_stale(
                prediction, timedelta(minutes=self.settings.stale_after_minutes)
            ),
        )
