"""Shared test fixtures."""

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from predcache.database import Base
from predcache.models import Prediction

from tests.fixtures.factories import create_prediction


@pytest.fixture
async def db_engine():
    """Create in-memory SQLite engine for tests."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        future=True,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create async session with transaction rollback."""
    async_session = async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def banker_prediction(db_session: AsyncSession) -> Prediction:
    """A stored banker prediction."""
    prediction = create_prediction(match_id=1, category="banker", confidence=80)
    db_session.add(prediction)
    await db_session.flush()
    return prediction


@pytest.fixture
async def vip_prediction(db_session: AsyncSession) -> Prediction:
    """A stored VIP prediction."""
    prediction = create_prediction(
        match_id=2, category="vip", confidence=90, tip="Home win"
    )
    db_session.add(prediction)
    await db_session.flush()
    return prediction


@pytest.fixture
async def stale_prediction(db_session: AsyncSession) -> Prediction:
    """A surprise prediction last written two days ago."""
    prediction = create_prediction(
        match_id=3,
        category="surprise",
        confidence=40,
        last_updated=datetime.now(timezone.utc) - timedelta(days=2),
    )
    db_session.add(prediction)
    await db_session.flush()
    return prediction
