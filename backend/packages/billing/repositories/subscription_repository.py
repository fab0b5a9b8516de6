"""
Repository for subscription reads.
"""

from typing import Optional
from sqlalchemy import select

from common.repositories.base import BaseRepository
from packages.billing.models.database.subscription import SubscriptionEntity
from packages.billing.models.domain.subscription import Subscription
from common.core.otel_axiom_exporter import trace_span


class SubscriptionRepository(BaseRepository[SubscriptionEntity, Subscription]):
    """Repository for user subscriptions."""

    def __init__(self):
        super().__init__(SubscriptionEntity, Subscription)

    @trace_span
    async def get_by_user_id(self, user_id: str) -> Optional[Subscription]:
        async with self._get_session() as session:
            result = await session.execute(
                select(SubscriptionEntity).where(SubscriptionEntity.user_id == user_id)
            )
            db_subscription = result.scalar_one_or_none()
            return self._entity_to_domain(db_subscription) if db_subscription else None
