"""Domain models for billing plans and entitlements."""

from typing import Optional
from pydantic import BaseModel

from packages.billing.models.domain.enums import (
    UNLIMITED,
    BillingInterval,
    FeatureAccessReason,
    GatedFeature,
    PlanTier,
)


class PlanLimits(BaseModel):
    """Effective limits for a user: tier defaults with feature overrides applied."""

    plan_tier: PlanTier
    max_locations: int
    max_ai_replies_per_period: int
    analytics: bool
    auto_reply: bool

    def has_unlimited_replies(self) -> bool:
        return self.max_ai_replies_per_period == UNLIMITED


class FeatureCheckResult(BaseModel):
    """
    Outcome of a feature gate. A denial is a normal result, never an error.

    ``required_plan`` is set on plan denials so callers can render an
    upgrade prompt.
    """

    feature: GatedFeature
    has_access: bool
    reason: FeatureAccessReason
    required_plan: Optional[PlanTier] = None


class PlanPrice(BaseModel):
    interval: BillingInterval
    stripe_price_id: Optional[str]
    price_cents: int
    price_formatted: str


class PlanInfo(BaseModel):
    """Complete plan information combining pricing and limits."""

    tier: PlanTier
    name: str
    description: str
    prices: list[PlanPrice]
    limits: PlanLimits
    features: list[str]


class PlansResponse(BaseModel):
    """Response model for plans endpoint."""

    plans: list[PlanInfo]
