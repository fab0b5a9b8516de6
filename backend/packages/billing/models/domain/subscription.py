"""
Domain models for subscriptions.
"""

from datetime import datetime
from typing import Dict, Optional
from pydantic import BaseModel, field_validator

from packages.billing.models.domain.enums import PlanTier, SubscriptionStatus


class Subscription(BaseModel):
    """
    User subscription domain model.

    One per user. Written by the Stripe webhook sync, read-only to this service.
    ``feature_overrides`` is a sparse map of feature name to bool that takes
    precedence over the tier default for that feature.
    """

    id: str
    user_id: str

    plan_tier: PlanTier = PlanTier.FREE
    # Free text from the billing sync, see SubscriptionStatus for known values
    status: str

    stripe_customer_id: Optional[str] = None
    stripe_subscription_id: Optional[str] = None
    stripe_price_id: Optional[str] = None

    feature_overrides: Optional[Dict[str, Optional[bool]]] = None

    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @field_validator("plan_tier", mode="before")
    @classmethod
    def unknown_tier_is_free(cls, v):
        if isinstance(v, PlanTier) or v in {tier.value for tier in PlanTier}:
            return v
        return PlanTier.FREE

    def grants_plan(self) -> bool:
        return SubscriptionStatus.status_grants_plan(self.status)

    def effective_tier(self) -> PlanTier:
        """Tier whose limits apply. Lapsed subscriptions fall back to free."""
        return self.plan_tier if self.grants_plan() else PlanTier.FREE

    def is_paid(self) -> bool:
        return (
            self.grants_plan()
            and self.plan_tier.is_paid()
            and bool(self.stripe_subscription_id)
        )

