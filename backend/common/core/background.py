"""
Detached background work.

Some follow-up work (orphan cleanup after an account merge, notification
fan-out) must not block or fail the request that triggered it. ``run_detached``
starts such work as an asyncio task that the caller never awaits:

- a strong reference is kept until the task finishes, so it cannot be
  garbage-collected mid-flight
- any exception is logged with the label and context, never re-raised
- ``drain_detached_tasks`` lets shutdown hooks and tests wait for completion

Usage:
    run_detached(
        "cleanup_orphaned_accounts",
        lambda: tenancy.cleanup_orphaned_accounts(user_id, account_id),
        user_id=user_id,
    )
"""

import asyncio
import contextvars
from typing import Any, Awaitable, Callable, Set

from common.core.otel_axiom_exporter import get_logger

logger = get_logger(__name__)

_active_tasks: Set[asyncio.Task] = set()


async def _run_logged(
    label: str, factory: Callable[[], Awaitable[Any]], context: dict
) -> None:
    try:
        await factory()
        logger.debug(f"[background] {label} completed", extra=context)
    except Exception as e:
        logger.error(
            f"[background] {label} failed: {e}",
            extra={**context, "task_label": label, "error": str(e)},
            exc_info=True,
        )


def run_detached(
    label: str, factory: Callable[[], Awaitable[Any]], **context: Any
) -> asyncio.Task:
    """Start ``factory()`` as a detached task. Its outcome is never observable.

    The task runs in a fresh context so it never reuses the caller's
    transaction session.
    """
    task = asyncio.create_task(
        _run_logged(label, factory, context),
        name=label,
        context=contextvars.Context(),
    )
    _active_tasks.add(task)
    task.add_done_callback(_active_tasks.discard)
    return task


def active_task_count() -> int:
    return len(_active_tasks)


async def drain_detached_tasks() -> None:
    """Wait for all detached tasks started so far."""
    if _active_tasks:
        await asyncio.gather(*list(_active_tasks), return_exceptions=True)
