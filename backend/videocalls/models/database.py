"""Database engine, sessions and the shared clock for timestamp columns.

Every timestamp column stores naive UTC; ``utcnow`` produces that form.
Request handlers receive a session through ``get_db``; services commit
explicitly and nothing expires on commit, so returned records stay readable.
"""

import logging
from datetime import datetime, UTC

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker, declarative_base
from videocalls.config.settings import settings
from videocalls.config.constants import DB_POOL_SIZE, DB_POOL_MAX_OVERFLOW

logger = logging.getLogger(__name__)


def database_url() -> str:
    """PostgreSQL URL for the configured database (alembic uses it too)."""
    return (
        f"postgresql+asyncpg://{settings.DB_USER}:{settings.DB_PASSWORD}"
        f"@{settings.DB_HOST}:{settings.DB_PORT}/{settings.DB_NAME}"
    )


engine = create_async_engine(
    database_url(),
    echo=settings.DEBUG,
    pool_pre_ping=True,
    pool_size=DB_POOL_SIZE,
    max_overflow=DB_POOL_MAX_OVERFLOW
)

AsyncSessionLocal = sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False
)

Base = declarative_base()


async def get_db():
    """Request-scoped session"""
    async with AsyncSessionLocal() as session:
        yield session


async def init_db():
    """Create missing tables. Production schemas are managed by alembic."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"[DB] Tables ready on {settings.DB_HOST}:{settings.DB_PORT}/{settings.DB_NAME}")


def utcnow() -> datetime:
    """Current time as naive UTC, the form every timestamp column stores."""
    return datetime.now(UTC).replace(tzinfo=None)
