"""Base repository with common keyed-store operations."""

import asyncio
from collections.abc import AsyncIterator, Awaitable
from typing import Any, Generic, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from predcache.config import get_settings
from predcache.database import Base
from predcache.exceptions import StoreTimeoutError, StoreUnavailableError

ModelType = TypeVar("ModelType", bound=Base)
T = TypeVar("T")


class BaseRepository(Generic[ModelType]):
    """Base repository keyed by a single primary-key column.

    Every call is bounded by a timeout. Driver errors surface as
    StoreUnavailableError, timeouts as StoreTimeoutError.
    """

    def __init__(
        self,
        model: type[ModelType],
        key: str,
        session: AsyncSession,
        timeout: float | None = None,
    ):
        self.model = model
        self.key_column = getattr(model, key)
        self.session = session
        self.timeout = timeout if timeout is not None else get_settings().store_timeout

    async def _run(self, operation: Awaitable[T], timeout: float | None = None) -> T:
        """Await a store operation under the timeout, translating failures."""
        limit = self.timeout if timeout is None else timeout
        try:
            return await asyncio.wait_for(operation, limit)
        except asyncio.TimeoutError as e:
            raise StoreTimeoutError(
                f"{self.model.__tablename__} operation exceeded {limit}s"
            ) from e
        except SQLAlchemyError as e:
            raise StoreUnavailableError(
                f"{self.model.__tablename__} store failed: {e}"
            ) from e

    async def get(self, key: Any, timeout: float | None = None) -> ModelType | None:
        """Get a record by key."""
        query = (
            select(self.model)
            .where(self.key_column == key)
            .execution_options(populate_existing=True)
        )
        result = await self._run(self.session.execute(query), timeout)
        return result.scalar_one_or_none()

    async def scan(
        self,
        *criteria: Any,
        order_by: tuple[Any, ...] = (),
        timeout: float | None = None,
    ) -> AsyncIterator[ModelType]:
        """Yield records matching the criteria. One pass per call."""
        query = select(self.model).execution_options(populate_existing=True)
        if criteria:
            query = query.where(*criteria)
        if order_by:
            query = query.order_by(*order_by)

        result = await self._run(self.session.execute(query), timeout)
        for instance in result.scalars():
            yield instance

    async def count(self, *criteria: Any, timeout: float | None = None) -> int:
        """Count records matching the criteria."""
        query = select(func.count()).select_from(self.model)
        if criteria:
            query = query.where(*criteria)

        result = await self._run(self.session.execute(query), timeout)
        return result.scalar_one()

    async def delete(self, key: Any, timeout: float | None = None) -> bool:
        """Delete a record by key."""
        return await self._run(self._delete(key), timeout)

    async def _delete(self, key: Any) -> bool:
        instance = await self.session.get(self.model, key)
        if instance is None:
            return False

        await self.session.delete(instance)
        await self.session.flush()
        return True

    async def delete_where(self, *criteria: Any, timeout: float | None = None) -> int:
        """Delete every record matching the criteria, returning how many."""
        query = (
            delete(self.model)
            .where(*criteria)
            .execution_options(synchronize_session="evaluate")
        )
        result = await self._run(self.session.execute(query), timeout)
        return result.rowcount
