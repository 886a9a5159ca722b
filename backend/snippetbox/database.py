"""
Snippetbox — Database Engine & Session Factory
================================================

What:  Async SQLAlchemy engine construction, session factory, and the
       declarative Base shared by every ORM model.
How:   create_engine() builds a pooled async engine from Settings;
       create_session_factory() wraps it in an async_sessionmaker that the
       stores receive at startup. Nothing here is created at import time,
       so each application (and each test) owns its own engine.

Connection Pooling:
    pool_size / max_overflow:  bounded persistent + burst connections
    pool_pre_ping:             validates a connection before handing it out
    pool_recycle=3600:         recycles connections older than an hour

    SQLite URLs skip the pool sizing arguments; aiosqlite manages its own
    connections.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator

from snippetbox.config import Settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Registers every model on one metadata object, which Alembic reads for
    --autogenerate and tests use for create_all().
    """
    pass


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware timestamp column that always round-trips as UTC.

    PostgreSQL returns aware values; SQLite stores text and returns naive
    values. Both are normalised here so comparisons against
    datetime.now(timezone.utc) behave the same on every backend.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        if value.tzinfo is None:
            raise ValueError("naive datetime values are not accepted; use UTC")
        value = value.astimezone(timezone.utc)
        if dialect.name == "sqlite":
            return value.replace(tzinfo=None)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    """Default clock for the stores."""
    return datetime.now(timezone.utc)


# ── Engine Configuration ──────────────────────────────────────────────────
def create_engine(settings: Settings) -> AsyncEngine:
    """
    Build the async engine for the configured database URL.

    SQL echo is enabled when log_level is DEBUG.
    """
    kwargs = {"echo": settings.log_level == "DEBUG"}
    if not settings.is_sqlite:
        kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(settings.database_url, **kwargs)


# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False keeps attribute access valid after commit, once the
# session (and its connection) has been released.
def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def create_schema(engine: AsyncEngine) -> None:
    """
    Create all tables that do not exist yet.

    Used by tests and by development setups with AUTO_CREATE_SCHEMA=true.
    Production schemas are managed with Alembic.
    """
    # Model modules must be imported so their tables are registered on Base.
    from snippetbox.models import snippet, user  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine(engine: AsyncEngine) -> None:
    """Closes all pooled connections during application shutdown."""
    await engine.dispose()
