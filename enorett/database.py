"""Async engine and session factory for the purchase store."""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from enorett.config import settings


class Base(DeclarativeBase):
    pass


# One connection per entitlement check, closed when the session ends
engine = create_async_engine(
    settings.database_url,
    echo=False,
    poolclass=NullPool,
)

async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_db() -> None:
    """Create the purchases table if it does not exist yet."""
    import enorett.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
