"""
Billing API routes.

Protected endpoints for plan limits, feature gates and usage.
"""

from fastapi import APIRouter, Depends

from common.db.context import readonly
from packages.auth.dependencies import get_current_user
from packages.auth.models.domain.authenticated_user import AuthenticatedUser
from packages.billing.models.domain.billing_period import BillingPeriod
from packages.billing.models.domain.enums import GatedFeature
from packages.billing.models.domain.plans import FeatureCheckResult, PlanLimits
from packages.billing.models.schemas.billing import (
    QuotaStatusResponse,
    SubscriptionStatusResponse,
)
from packages.billing.services.billing_period import get_current_billing_period
from packages.billing.services.entitlement_service import EntitlementService
from packages.billing.services.quota_service import QuotaService

router = APIRouter()


# ============================================================================
# Plan & Limits
# ============================================================================


@router.get("/subscription", response_model=SubscriptionStatusResponse)
async def get_subscription_status(
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Current plan tier, subscription status and effective limits."""
    entitlement_service = EntitlementService()
    subscription = await entitlement_service.subscription_service.get_by_user_id(
        current_user.user_id
    )
    limits = await entitlement_service.get_user_plan_limits(current_user.user_id)

    return SubscriptionStatusResponse(
        plan_tier=limits.plan_tier,
        status=subscription.status if subscription else None,
        has_paid_subscription=bool(subscription and subscription.is_paid()),
        limits=limits,
    )


@router.get("/limits", response_model=PlanLimits)
@readonly
async def get_plan_limits(
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    return await EntitlementService().get_user_plan_limits(current_user.user_id)


@router.get("/features/{feature}", response_model=FeatureCheckResult)
@readonly
async def check_feature(
    feature: GatedFeature,
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """
    Evaluate a feature gate.

    A denial is returned as a normal 200 response with ``has_access=false``
    and the plan that would unlock the feature.
    """
    return await EntitlementService().check_user_feature_access(
        current_user.user_id, feature
    )


# ============================================================================
# Usage
# ============================================================================


@router.get("/period", response_model=BillingPeriod)
async def get_billing_period(
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Calendar-month window that usage counts are scoped to."""
    return get_current_billing_period()


@router.get("/quota", response_model=QuotaStatusResponse)
@readonly
async def get_quota_status(
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    quota_service = QuotaService()
    return QuotaStatusResponse(
        ai_replies=await quota_service.check_reply_quota(current_user.user_id),
        locations=await quota_service.check_location_quota(current_user.user_id),
    )
