"""
Async engine and session factory.

Every request gets its own AsyncSession through the `get_db` dependency.
Services only flush; the transaction is committed here once the handler
returns, or rolled back if it raised.
"""

from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import get_settings

settings = get_settings()


def _begin_immediate(engine: AsyncEngine) -> None:
    """
    Make every SQLite transaction take the write lock up front.

    With the driver's default deferred BEGIN, two sessions can both run the
    overlap SELECT before either holds the lock, and both inserts then
    succeed. BEGIN IMMEDIATE makes the second session wait for the first
    commit, so its overlap query sees the committed row.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine; pool tuning only applies to server databases."""
    if make_url(url).get_backend_name() == "sqlite":
        engine = create_async_engine(url, echo=echo)
        _begin_immediate(engine)
        return engine
    return create_async_engine(
        url,
        echo=echo,
        pool_size=20,
        max_overflow=10,
        pool_timeout=30,
        pool_recycle=1800,  # 30 minutes
        pool_pre_ping=True,
    )


engine = build_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)
SessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
