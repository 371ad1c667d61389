"""Request-scoped database sessions."""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shared.database.postgres import get_async_session_factory

_factory: async_sessionmaker[AsyncSession] | None = None


def init_db(database_url: str) -> async_sessionmaker[AsyncSession]:
    global _factory
    _factory = get_async_session_factory(database_url)
    return _factory


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    if _factory is None:
        raise RuntimeError("init_db() has not been called")
    return _factory


async def dispose_db() -> None:
    """Close pooled connections; called on shutdown."""
    global _factory
    if _factory is None:
        return
    await _factory.kw["bind"].dispose()
    _factory = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One session per request: committed when the handler returns, rolled back if it raises."""
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
