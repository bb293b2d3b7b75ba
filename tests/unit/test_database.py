"""Tests for session management."""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from predcache.database import commit, get_db
from predcache.exceptions import StoreUnavailableError

LOCKED = OperationalError("COMMIT", {}, Exception("database is locked"))


class TestCommit:
    """Tests for commit() and the get_db dependency."""

    @pytest.mark.asyncio
    async def test_commit_translates_driver_error(self, db_session):
        """Driver errors at commit surface as StoreUnavailableError."""
        with patch.object(db_session, "commit", new=AsyncMock(side_effect=LOCKED)):
            with pytest.raises(StoreUnavailableError) as exc_info:
                await commit(db_session)

        assert exc_info.value.__cause__ is LOCKED

    @pytest.mark.asyncio
    async def test_get_db_commit_failure(self, db_engine):
        """The dependency's closing commit raises StoreUnavailableError."""
        factory = async_sessionmaker(
            bind=db_engine, class_=AsyncSession, expire_on_commit=False
        )
        with patch("predcache.database.AsyncSessionLocal", factory), patch.object(
            AsyncSession, "commit", new=AsyncMock(side_effect=LOCKED)
        ):
            dependency = get_db()
            await dependency.__anext__()
            with pytest.raises(StoreUnavailableError):
                await dependency.__anext__()
