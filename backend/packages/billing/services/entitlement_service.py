"""
Service for plan entitlements.

Turns a user's subscription into effective limits and evaluates feature gates.
Feature overrides on the subscription take precedence, per feature, over the
tier default: support can grant or revoke a feature without touching the tier.
"""

from typing import Dict, Optional

from common.core.otel_axiom_exporter import trace_span, get_logger
from packages.billing.models.domain.enums import (
    FeatureAccessReason,
    GatedFeature,
    PlanTier,
)
from packages.billing.models.domain.plans import FeatureCheckResult, PlanLimits
from packages.billing.models.domain.subscription import Subscription
from packages.billing.services.subscription_service import SubscriptionService

logger = get_logger(__name__)

FeatureOverrides = Optional[Dict[str, Optional[bool]]]

_FEATURE_NAMES = {feature.value for feature in GatedFeature}


def get_plan_limits(tier: PlanTier, feature_overrides: FeatureOverrides = None) -> PlanLimits:
    """Tier defaults with every non-null override applied."""
    limits = tier.get_limits()

    for name, value in (feature_overrides or {}).items():
        if value is None:
            continue
        if name not in _FEATURE_NAMES:
            logger.debug(f"Ignoring unknown feature override {name}")
            continue
        limits[name] = value

    return PlanLimits(plan_tier=tier, **limits)


def check_feature_access(
    tier: PlanTier,
    feature: GatedFeature,
    feature_overrides: FeatureOverrides = None,
) -> FeatureCheckResult:
    """
    Evaluate a feature gate.

    Order: a non-null override decides; otherwise the tier default; otherwise
    denied with the lowest tier that unlocks the feature.
    """
    override = (feature_overrides or {}).get(feature.value)
    if override is not None:
        return FeatureCheckResult(
            feature=feature,
            has_access=override,
            reason=FeatureAccessReason.OVERRIDE,
        )

    if tier.get_limits()[feature.value]:
        return FeatureCheckResult(
            feature=feature, has_access=True, reason=FeatureAccessReason.PLAN
        )

    return FeatureCheckResult(
        feature=feature,
        has_access=False,
        reason=FeatureAccessReason.DENIED,
        required_plan=feature.required_plan(),
    )


class EntitlementService:
    """Service for resolving a user's plan and limits."""

    def __init__(self):
        self.subscription_service = SubscriptionService()

    async def _get_subscription(self, user_id: str) -> Optional[Subscription]:
        return await self.subscription_service.get_by_user_id(user_id)

    @staticmethod
    def _tier_and_overrides(subscription: Optional[Subscription]):
        if subscription is None:
            return PlanTier.FREE, None
        return subscription.effective_tier(), subscription.feature_overrides

    @trace_span
    async def get_plan_tier(self, user_id: str) -> PlanTier:
        tier, _ = self._tier_and_overrides(await self._get_subscription(user_id))
        return tier

    @trace_span
    async def has_paid_subscription(self, user_id: str) -> bool:
        subscription = await self._get_subscription(user_id)
        return bool(subscription and subscription.is_paid())

    @trace_span
    async def get_user_plan_limits(self, user_id: str) -> PlanLimits:
        """
        Effective limits for the user.

        No subscription, or one that is not active/trialing, gets free limits.
        Overrides on an existing subscription row apply either way.
        """
        subscription = await self._get_subscription(user_id)
        tier, overrides = self._tier_and_overrides(subscription)
        limits = get_plan_limits(tier, overrides)

        logger.debug(
            f"Resolved {tier.value} limits for user {user_id}",
            extra={
                "user_id": user_id,
                "plan_tier": tier.value,
                "has_overrides": bool(overrides),
            },
        )
        return limits

    @trace_span
    async def check_user_feature_access(
        self, user_id: str, feature: GatedFeature
    ) -> FeatureCheckResult:
        subscription = await self._get_subscription(user_id)
        tier, overrides = self._tier_and_overrides(subscription)
        return check_feature_access(tier, feature, overrides)
