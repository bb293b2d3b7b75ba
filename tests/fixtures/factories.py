"""Test data factories."""

from datetime import datetime, timedelta, timezone
from typing import Any

from predcache.models import Prediction

KICKOFF = datetime(2030, 5, 18, 19, 45, tzinfo=timezone.utc)


def create_prediction_payload(
    match_id: int = 1001,
    sport: str = "football",
    category: str | None = "banker",
    tip: str = "Over 2.5",
    confidence: int = 75,
    kickoff: datetime | None = None,
    home_name: str = "Arsenal",
    away_name: str = "Chelsea",
    league_name: str = "Premier League",
    **kwargs: Any,
) -> dict[str, Any]:
    """Create a raw ingestion payload."""
    payload = {
        "match_id": match_id,
        "sport": sport,
        "category": category,
        "tip": tip,
        "confidence": confidence,
        "home_team": {"id": 42, "name": home_name, "rank": 2},
        "away_team": {"id": 49, "name": away_name, "rank": 5},
        "league": {"id": 39, "name": league_name},
        "fixture": {
            "date": (kickoff or KICKOFF).isoformat(),
            "time": (kickoff or KICKOFF).strftime("%H:%M"),
        },
        "reasoning": {
            "home_form": "WWDWL",
            "away_form": "LDWWW",
            "h2h": "3 wins, 1 draw in last 4",
            "stats": {"avg_goals": 2.9},
        },
        "source": "ai",
    }
    payload.update(kwargs)
    return payload


def create_prediction(
    match_id: int = 1001,
    sport: str = "football",
    category: str = "banker",
    tip: str = "Over 2.5",
    confidence: int = 75,
    kickoff: datetime | None = None,
    last_updated: datetime | None = None,
    **kwargs: Any,
) -> Prediction:
    """Create a Prediction instance."""
    return Prediction(
        match_id=match_id,
        sport=sport,
        category=category,
        tip=tip,
        confidence=confidence,
        source=kwargs.pop("source", "manual"),
        home_team=kwargs.pop("home_team", {"id": 1, "name": "Home FC", "rank": None}),
        away_team=kwargs.pop("away_team", {"id": 2, "name": "Away FC", "rank": None}),
        league=kwargs.pop("league", {"id": 10, "name": "Test League"}),
        fixture_date=kickoff or KICKOFF,
        fixture_time=kwargs.pop("fixture_time", None),
        reasoning=kwargs.pop("reasoning", None),
        last_updated=last_updated or datetime.now(timezone.utc),
        **kwargs,
    )


def kickoffs(count: int, start: datetime | None = None) -> list[datetime]:
    """Consecutive daily kickoff times."""
    start = start or KICKOFF
    return [start + timedelta(days=i) for i in range(count)]
