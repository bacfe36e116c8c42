import logging
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


# Base class for declarative models
class Base(DeclarativeBase):
    pass


def create_db_engine(
    database_url: str,
    pool_size: int | None = None,
    max_overflow: int | None = None,
    echo: bool = False,
) -> AsyncEngine:
    """Create the process-wide async engine (the pooled database connection)."""
    kwargs: dict = {"echo": echo}
    # SQLite (tests, local tooling) uses a static pool without sizing options
    if not database_url.startswith("sqlite") and pool_size is not None:
        kwargs["pool_size"] = pool_size
        kwargs["max_overflow"] = max_overflow or 0
    logger.info("Creating database engine")
    return create_async_engine(database_url, **kwargs)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session maker handed to repositories and services."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


# Function to initialize the database (create tables)
async def init_db(engine: AsyncEngine) -> None:
    # Import models so every table is registered on Base.metadata
    import database.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# Function to close database connections
async def close_db(engine: AsyncEngine) -> None:
    """Close database engine and connections."""
    await engine.dispose()
