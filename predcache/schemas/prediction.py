"""Prediction schemas."""

from datetime import datetime
from typing import Annotated, Any

from pydantic import Field, StringConstraints

from predcache.models import Category, Source, Sport
from predcache.schemas.common import BaseSchema

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class TeamRef(BaseSchema):
    """Team as supplied by ingestion."""

    id: int | None = Field(None, description="Provider team ID")
    name: NonEmptyStr = Field(..., description="Team name")
    rank: int | None = Field(None, ge=1, description="League position")


class LeagueRef(BaseSchema):
    """League as supplied by ingestion."""

    id: int | None = Field(None, description="Provider league ID")
    name: NonEmptyStr = Field(..., description="League name")


class FixtureInfo(BaseSchema):
    """Scheduled kickoff."""

    date: datetime = Field(..., description="Kickoff date and time")
    time: str | None = Field(None, max_length=10, description="Display time, e.g. 20:45")


class Reasoning(BaseSchema):
    """Structured notes behind a prediction."""

    home_form: str | None = None
    away_form: str | None = None
    h2h: str | None = None
    stats: dict[str, Any] = Field(default_factory=dict)


class PredictionCreate(BaseSchema):
    """Normalized ingestion payload."""

    match_id: int = Field(..., strict=True, description="External match ID")
    sport: Sport
    category: Category | None = Field(None, description="Explicit category")
    is_vip: bool = Field(False, strict=True, description="Legacy VIP flag")
    tip: NonEmptyStr = Field(..., description="Predicted outcome")
    confidence: int = Field(..., strict=True, ge=0, le=100, description="Confidence 0-100")
    home_team: TeamRef
    away_team: TeamRef
    league: LeagueRef
    fixture: FixtureInfo
    reasoning: Reasoning | None = None
    source: Source = Source.MANUAL


class ReclassifyRequest(BaseSchema):
    """Explicit category change."""

    category: Category


class TeamResponse(BaseSchema):
    """Team in a prediction response."""

    id: int | None = None
    name: str
    rank: int | None = None


class LeagueResponse(BaseSchema):
    """League in a prediction response."""

    id: int | None = None
    name: str


class FixtureResponse(BaseSchema):
    """Kickoff in a prediction response."""

    date: datetime
    time: str


class ReasoningResponse(BaseSchema):
    """Reasoning in a prediction response."""

    home_form: str
    away_form: str
    h2h: str
    stats: dict[str, Any]


class PredictionResponse(BaseSchema):
    """Prediction response schema."""

    match_id: int
    sport: Sport
    category: Category
    tip: str
    confidence: int
    source: Source
    home_team: TeamResponse
    away_team: TeamResponse
    league: LeagueResponse
    fixture: FixtureResponse
    reasoning: ReasoningResponse
    last_updated: datetime
    is_stale: bool = False


class PredictionListResponse(BaseSchema):
    """Paginated prediction list."""

    items: list[PredictionResponse]
    total: int
    page: int
    page_size: int
    pages: int


class CacheStatsResponse(BaseSchema):
    """Cache freshness summary."""

    total: int
    fresh: int
    stale: int
    by_category: dict[str, int]
    stale_after_minutes: int


class ViolationResponse(BaseSchema):
    """One rejected field."""

    field: str
    message: str
