"""Billing services."""

from packages.billing.services.subscription_service import SubscriptionService
from packages.billing.services.entitlement_service import EntitlementService
from packages.billing.services.quota_service import QuotaService
from packages.billing.services.plans_service import PlansService
from packages.billing.services.price_catalog import PriceCatalog, get_price_catalog
from packages.billing.services.billing_period import get_current_billing_period

__all__ = [
    "SubscriptionService",
    "EntitlementService",
    "QuotaService",
    "PlansService",
    "PriceCatalog",
    "get_price_catalog",
    "get_current_billing_period",
]
