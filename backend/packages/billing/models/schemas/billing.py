from typing import Optional
from pydantic import BaseModel

from packages.billing.models.domain.enums import PlanTier
from packages.billing.models.domain.plans import PlanLimits
from packages.billing.models.domain.usage import QuotaCheck


class SubscriptionStatusResponse(BaseModel):
    """Plan summary for the current user. ``status`` is None without a subscription."""

    plan_tier: PlanTier
    status: Optional[str] = None
    has_paid_subscription: bool
    limits: PlanLimits


class QuotaStatusResponse(BaseModel):
    ai_replies: QuotaCheck
    locations: QuotaCheck
