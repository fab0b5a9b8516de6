"""
Repository for usage event tracking.
"""

from datetime import datetime
from sqlalchemy import select, func

from common.repositories.base import BaseRepository
from packages.billing.models.database.usage import UsageEventEntity
from packages.billing.models.domain.usage import UsageEvent
from packages.billing.models.domain.enums import UsageEventType
from common.core.otel_axiom_exporter import trace_span


class UsageEventRepository(BaseRepository[UsageEventEntity, UsageEvent]):
    """Repository for managing usage events."""

    def __init__(self):
        super().__init__(UsageEventEntity, UsageEvent)

    @trace_span
    async def get_period_count(
        self,
        user_id: str,
        event_type: UsageEventType,
        start_date: datetime,
        end_date: datetime,
    ) -> int:
        """Get sum of quantity for a billing period."""
        async with self._get_session() as session:
            result = await session.execute(
                select(func.coalesce(func.sum(UsageEventEntity.quantity), 0)).where(
                    UsageEventEntity.user_id == user_id,
                    UsageEventEntity.event_type == event_type.value,
                    UsageEventEntity.created_at >= start_date,
                    UsageEventEntity.created_at < end_date,
                )
            )
            return result.scalar_one() or 0
