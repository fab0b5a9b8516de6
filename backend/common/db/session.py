"""
Engine and session factory lifecycle.

The engine is created lazily on first use, exactly once, and disposed
explicitly from the application lifespan via ``dispose_engine()``.
"""

from typing import Optional
from uuid import uuid4

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from common.core.config import settings
from common.core.otel_axiom_exporter import get_logger

logger = get_logger(__name__)

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None
_readonly_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def _async_database_url() -> str:
    # Replace postgresql:// with postgresql+asyncpg:// for async support
    return settings.database_url.replace("postgresql://", "postgresql+asyncpg://")


def get_engine() -> AsyncEngine:
    """Return the process-wide engine, creating it on first call."""
    global _engine

    if _engine is not None:
        return _engine

    # NullPool (db_use_nullpool=True): No pooling, new connection per operation
    # Default pool: Connection pooling (for API servers with concurrent requests)
    engine_kwargs = {
        "echo": settings.debug,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
        "connect_args": {
            "prepared_statement_name_func": lambda: f"__asyncpg_{uuid4()}__",
        },
    }

    if settings.db_use_nullpool:
        logger.info("Using NullPool - no connection pooling")
        engine_kwargs["poolclass"] = pool.NullPool
    else:
        logger.info(
            f"Using connection pooling - pool_size={settings.db_pool_size}, max_overflow={settings.db_pool_overflow}"
        )
        engine_kwargs["pool_size"] = settings.db_pool_size
        engine_kwargs["max_overflow"] = settings.db_pool_overflow

    _engine = create_async_engine(_async_database_url(), **engine_kwargs)
    return _engine


def get_session_factory(readonly: bool = False) -> async_sessionmaker[AsyncSession]:
    """Return the writer or reader session factory, creating it on first call.

    Both factories point at the same engine today. When a read replica is added,
    only the readonly factory needs a different bind.
    """
    global _session_factory, _readonly_session_factory

    if readonly:
        if _readonly_session_factory is None:
            _readonly_session_factory = async_sessionmaker(
                get_engine(), class_=AsyncSession, expire_on_commit=False
            )
        return _readonly_session_factory

    if _session_factory is None:
        _session_factory = async_sessionmaker(
            get_engine(), class_=AsyncSession, expire_on_commit=False
        )
    return _session_factory


async def dispose_engine() -> None:
    """Close every pooled connection and forget the factories."""
    global _engine, _session_factory, _readonly_session_factory

    if _engine is not None:
        await _engine.dispose()
        logger.info("Database engine disposed")

    _engine = None
    _session_factory = None
    _readonly_session_factory = None
