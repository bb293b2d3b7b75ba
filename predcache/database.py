"""Database connection and session management."""

from collections.abc import AsyncGenerator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from predcache.config import get_settings
from predcache.exceptions import StoreUnavailableError

settings = get_settings()

# Convert sqlite:// to sqlite+aiosqlite:// for async
if settings.database_url.startswith("sqlite:///"):
    async_database_url = settings.database_url.replace("sqlite:///", "sqlite+aiosqlite:///")
else:
    async_database_url = settings.database_url

async_engine = create_async_engine(
    async_database_url,
    echo=settings.debug,
    future=True,
)

AsyncSessionLocal = async_sessionmaker(
    bind=async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


async def commit(session: AsyncSession) -> None:
    """Commit the session, surfacing driver failures as StoreUnavailableError."""
    try:
        await session.commit()
    except SQLAlchemyError as e:
        raise StoreUnavailableError(f"commit failed: {e}") from e


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await commit(session)
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Initialize database tables."""
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
