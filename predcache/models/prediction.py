"""Prediction model."""

import enum
from datetime import datetime

from sqlalchemy import Index, Integer, String, Text
from sqlalchemy.dialects.sqlite import JSON
from sqlalchemy.orm import Mapped, mapped_column

from predcache.database import Base
from predcache.models.base import TimestampMixin, UTCDateTime


class Sport(str, enum.Enum):
    """Sport enum."""

    FOOTBALL = "football"
    BASKETBALL = "basketball"


class Category(str, enum.Enum):
    """Prediction category; decides default visibility."""

    BANKER = "banker"  # high-confidence pick
    SURPRISE = "surprise"  # underdog pick
    VIP = "vip"  # members only


class Source(str, enum.Enum):
    """Where a prediction came from."""

    AI = "ai"
    HIGHLIGHTLY = "highlightly"
    MANUAL = "manual"


class Prediction(Base, TimestampMixin):
    """Prediction table model. One row per match."""

    __tablename__ = "predictions"
    __table_args__ = (
        Index("ix_predictions_sport", "sport"),
        Index("ix_predictions_last_updated", "last_updated"),
    )

    match_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    sport: Mapped[str] = mapped_column(String(20), nullable=False)
    category: Mapped[str] = mapped_column(String(20), nullable=False)
    tip: Mapped[str] = mapped_column(Text, nullable=False)
    confidence: Mapped[int] = mapped_column(Integer, nullable=False)
    source: Mapped[str] = mapped_column(String(20), nullable=False, default=Source.MANUAL.value)

    # {"id": int, "name": str, "rank": int | None}
    home_team: Mapped[dict] = mapped_column(JSON, nullable=False)
    away_team: Mapped[dict] = mapped_column(JSON, nullable=False)
    # {"id": int, "name": str}
    league: Mapped[dict] = mapped_column(JSON, nullable=False)

    fixture_date: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    fixture_time: Mapped[str | None] = mapped_column(String(10), nullable=True)  # display time, "20:45"

    # {"home_form", "away_form", "h2h", "stats"}
    reasoning: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    last_updated: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<Prediction(match_id={self.match_id}, category='{self.category}', "
            f"confidence={self.confidence})>"
        )


# Serves list ordering: (category, confidence desc, kickoff asc)
Index(
    "ix_predictions_category_rank",
    Prediction.category,
    Prediction.confidence.desc(),
    Prediction.fixture_date,
)
