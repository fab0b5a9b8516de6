"""
Service for reading subscriptions.

Subscriptions are written by the Stripe webhook sync only; reads here are
cached for five minutes.
"""

from typing import Optional

from common.core.otel_axiom_exporter import trace_span, get_logger
from common.providers.caching.decorators import cache
from packages.billing.cache_keys import subscription_by_user_key
from packages.billing.repositories.subscription_repository import SubscriptionRepository
from packages.billing.models.domain.subscription import Subscription

logger = get_logger(__name__)


class SubscriptionService:
    """Service for subscription lookup."""

    def __init__(self):
        self.subscription_repo = SubscriptionRepository()

    @trace_span
    @cache(model_type=Subscription, ttl=300, key_generator=subscription_by_user_key)
    async def get_by_user_id(self, user_id: str) -> Optional[Subscription]:
        """Get subscription for a user. Cached for 5 minutes."""
        return await self.subscription_repo.get_by_user_id(user_id)
