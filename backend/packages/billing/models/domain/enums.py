"""
Billing enums - strongly typed enumerations for plans, subscriptions and usage.
"""

from enum import Enum
from typing import Optional

UNLIMITED = -1


class PlanTier(str, Enum):
    """
    Subscription plan tiers, ordered from lowest to highest.

    Paid tiers map to Stripe price ids through the price catalog.
    """

    FREE = "free"
    BASIC = "basic"
    PRO = "pro"

    @property
    def rank(self) -> int:
        return list(PlanTier).index(self)

    def is_paid(self) -> bool:
        return self != PlanTier.FREE

    def get_limits(self) -> dict:
        """
        Default limits for this tier.

        Limits:
        - max_locations: Locations across all of the user's accounts
        - max_ai_replies_per_period: AI replies per calendar month (-1 = unlimited)
        - analytics: Insights dashboard
        - auto_reply: Automatic replies by star rating
        """
        limits = {
            PlanTier.FREE: {
                "max_locations": 1,
                "max_ai_replies_per_period": 5,
                "analytics": False,
                "auto_reply": False,
            },
            PlanTier.BASIC: {
                "max_locations": 3,
                "max_ai_replies_per_period": 200,
                "analytics": False,
                "auto_reply": True,
            },
            PlanTier.PRO: {
                "max_locations": 10,
                "max_ai_replies_per_period": UNLIMITED,
                "analytics": True,
                "auto_reply": True,
            },
        }
        return dict(limits[self])

    def get_list_price_cents(self, interval: "BillingInterval") -> int:
        """List price used when Stripe cannot be reached."""
        prices = {
            PlanTier.FREE: {BillingInterval.MONTHLY: 0, BillingInterval.YEARLY: 0},
            PlanTier.BASIC: {
                BillingInterval.MONTHLY: 3900,  # $39
                BillingInterval.YEARLY: 39000,  # $390
            },
            PlanTier.PRO: {
                BillingInterval.MONTHLY: 7900,  # $79
                BillingInterval.YEARLY: 79000,  # $790
            },
        }
        return prices[self][interval]


class BillingInterval(str, Enum):
    MONTHLY = "monthly"
    YEARLY = "yearly"


class SubscriptionStatus(str, Enum):
    """
    Known Stripe subscription statuses.

    The stored status is free text written by the billing sync; values not
    listed here are kept as-is and never grant a plan.
    """

    ACTIVE = "active"
    TRIALING = "trialing"
    PAST_DUE = "past_due"
    CANCELED = "canceled"
    INCOMPLETE = "incomplete"
    INCOMPLETE_EXPIRED = "incomplete_expired"
    UNPAID = "unpaid"
    PAUSED = "paused"

    def grants_plan(self) -> bool:
        """Whether a subscription in this status receives its tier's limits."""
        return self in (SubscriptionStatus.ACTIVE, SubscriptionStatus.TRIALING)

    @classmethod
    def status_grants_plan(cls, status: Optional[str]) -> bool:
        try:
            return cls(status).grants_plan()
        except ValueError:
            return False


class GatedFeature(str, Enum):
    """Boolean features that a plan tier or a feature override can unlock."""

    ANALYTICS = "analytics"
    AUTO_REPLY = "auto_reply"

    def required_plan(self) -> Optional[PlanTier]:
        """Lowest tier whose default limits enable this feature."""
        for tier in PlanTier:
            if tier.get_limits()[self.value]:
                return tier
        return None


class FeatureAccessReason(str, Enum):
    PLAN = "plan"  # Granted by the tier's default limits
    OVERRIDE = "override"  # Decided by a per-subscription feature override
    DENIED = "denied"  # Not on this tier; an upgrade unlocks it


class UsageEventType(str, Enum):
    """Types of metered usage events."""

    AI_REPLY = "ai_reply"
