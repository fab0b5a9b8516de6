"""Domain models for billing."""

from packages.billing.models.domain.enums import (
    UNLIMITED,
    PlanTier,
    BillingInterval,
    SubscriptionStatus,
    GatedFeature,
    FeatureAccessReason,
    UsageEventType,
)
from packages.billing.models.domain.subscription import Subscription
from packages.billing.models.domain.plans import (
    PlanLimits,
    FeatureCheckResult,
    PlanInfo,
    PlanPrice,
    PlansResponse,
)
from packages.billing.models.domain.billing_period import BillingPeriod
from packages.billing.models.domain.usage import (
    QuotaCheck,
    UsageEvent,
    UsageEventCreateModel,
)

__all__ = [
    # Enums
    "UNLIMITED",
    "PlanTier",
    "BillingInterval",
    "SubscriptionStatus",
    "GatedFeature",
    "FeatureAccessReason",
    "UsageEventType",
    # Subscription
    "Subscription",
    # Plans
    "PlanLimits",
    "FeatureCheckResult",
    "PlanInfo",
    "PlanPrice",
    "PlansResponse",
    "BillingPeriod",
    # Usage
    "QuotaCheck",
    "UsageEvent",
    "UsageEventCreateModel",
]
