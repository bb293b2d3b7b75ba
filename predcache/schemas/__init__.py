"""Pydantic schemas."""

from predcache.schemas.common import BaseSchema, ViewerTierEnum
from predcache.schemas.prediction import (
    CacheStatsResponse,
    FixtureInfo,
    FixtureResponse,
    LeagueRef,
    LeagueResponse,
    PredictionCreate,
    PredictionListResponse,
    PredictionResponse,
    Reasoning,
    ReasoningResponse,
    ReclassifyRequest,
    TeamRef,
    TeamResponse,
    ViolationResponse,
)

__all__ = [
    # Common
    "BaseSchema",
    "ViewerTierEnum",
    # Prediction input
    "PredictionCreate",
    "ReclassifyRequest",
    "TeamRef",
    "LeagueRef",
    "FixtureInfo",
    "Reasoning",
    # Prediction output
    "PredictionResponse",
    "PredictionListResponse",
    "TeamResponse",
    "LeagueResponse",
    "FixtureResponse",
    "ReasoningResponse",
    "CacheStatsResponse",
    "ViolationResponse",
]
