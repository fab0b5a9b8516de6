"""
Operation-scoped database sessions.

Usage:
    # Single operation - acquires and releases immediately
    async with get_session() as session:
        account = await session.get(AccountEntity, account_id)

    # Multiple operations in one transaction - share one session
    async with transaction():
        account = await account_repo.create(...)
        await membership_repo.insert_if_absent(...)
    # Commits together, then releases

See also:
    - common/db/context.py: Decorators (@readonly, @transactional)
    - common/db/session.py: Engine and session factory lifecycle
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from common.core.otel_axiom_exporter import get_logger
from common.db.session import get_session_factory
from common.db.context import (
    get_current_session,
    set_current_session,
    reset_current_session,
    is_readonly_forced,
)

logger = get_logger(__name__)


@asynccontextmanager
async def transaction(readonly: bool = False) -> AsyncGenerator[AsyncSession, None]:
    """
    Explicit transaction boundary.

    All repository calls inside share one session. Commits on success
    (unless readonly), rolls back and re-raises on exception. Nested
    ``transaction()`` blocks reuse the outer session and leave commit to it.
    """
    effective_readonly = readonly or is_readonly_forced()
    existing = get_current_session(readonly=effective_readonly)
    if existing is not None:
        yield existing
        return

    session_factory = get_session_factory(readonly=effective_readonly)

    start = time.perf_counter()
    async with session_factory() as session:
        logger.debug(
            f"Transaction session acquire: {(time.perf_counter() - start) * 1000:.2f}ms, readonly={effective_readonly}"
        )

        token = set_current_session(session, readonly=effective_readonly)
        try:
            yield session
            if not effective_readonly:
                await session.commit()
        except Exception as e:
            logger.error(f"Transaction rollback due to: {e}")
            await session.rollback()
            raise
        finally:
            reset_current_session(token, readonly=effective_readonly)


@asynccontextmanager
async def get_session(readonly: bool = False) -> AsyncGenerator[AsyncSession, None]:
    """
    Get a session for a single DB operation.

    Reuses the session of an enclosing ``transaction()``. Otherwise acquires
    a new session, commits (unless readonly) and releases it immediately.
    """
    effective_readonly = readonly or is_readonly_forced()
    existing = get_current_session(readonly=effective_readonly)

    if existing:
        # Inside a transaction - the transaction owns the commit
        yield existing
        return

    session_factory = get_session_factory(readonly=effective_readonly)
    async with session_factory() as session:
        try:
            yield session
            if not effective_readonly:
                await session.commit()
        except Exception as e:
            logger.error(f"Operation rollback due to: {e}")
            await session.rollback()
            raise
