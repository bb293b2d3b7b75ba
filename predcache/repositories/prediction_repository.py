"""Prediction repository."""

from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.ext.asyncio import AsyncSession

from predcache.models import Prediction
from predcache.models.base import utcnow
from predcache.repositories.base import BaseRepository
from predcache.repositories.locks import KeyedLock

# Shared by every repository instance so that requests on separate
# sessions still serialize writes to the same match.
match_locks = KeyedLock()


class PredictionRepository(BaseRepository[Prediction]):
    """Keyed store for Prediction records, one per match_id."""

    def __init__(self, session: AsyncSession, timeout: float | None = None):
        super().__init__(Prediction, "match_id", session, timeout)

    async def put(
        self,
        match_id: int,
        record: dict[str, Any],
        timeout: float | None = None,
        *,
        keep_category: bool = False,
    ) -> Prediction:
        """Write the whole record for a match, replacing any existing one.

        With keep_category, an existing record is only replaced when its
        category matches the new one; otherwise it is left as it was and
        returned unchanged. The check and the write are one statement.
        """
        return await self._run(
            self._put(match_id, record, keep_category), timeout
        )

    async def _put(
        self, match_id: int, record: dict[str, Any], keep_category: bool
    ) -> Prediction:
        values = {**record, "match_id": match_id, "last_updated": utcnow()}
        stmt = insert(Prediction).values(**values)
        replace = {
            name: stmt.excluded[name] for name in values if name != "match_id"
        }
        replace["updated_at"] = func.now()
        stmt = stmt.on_conflict_do_update(
            index_elements=[Prediction.match_id],
            set_=replace,
            where=(
                Prediction.category == stmt.excluded.category
                if keep_category
                else None
            ),
        )

        async with match_locks.hold(match_id):
            await self.session.execute(stmt)
            return await self.session.get(
                Prediction, match_id, populate_existing=True
            )

    async def set_category(
        self, match_id: int, category: str, timeout: float | None = None
    ) -> Prediction | None:
        """Change only the category of a match's record. None if there is none."""
        return await self._run(self._set_category(match_id, category), timeout)

    async def _set_category(self, match_id: int, category: str) -> Prediction | None:
        stmt = (
            update(Prediction)
            .where(Prediction.match_id == match_id)
            .values(category=category, last_updated=utcnow(), updated_at=func.now())
            .execution_options(synchronize_session=False)
        )

        async with match_locks.hold(match_id):
            await self.session.execute(stmt)
            return await self.session.get(
                Prediction, match_id, populate_existing=True
            )

    async def delete(self, key: int, timeout: float | None = None) -> bool:
        """Delete the record for a match."""
        return await self._run(self._locked_delete(key), timeout)

    async def _locked_delete(self, key: int) -> bool:
        async with match_locks.hold(key):
            return await self._delete(key)

    async def count_by_category(self, timeout: float | None = None) -> dict[str, int]:
        """Number of records per category."""
        query = select(Prediction.category, func.count()).group_by(Prediction.category)
        result = await self._run(self.session.execute(query), timeout)
        return {category: total for category, total in result.all()}
