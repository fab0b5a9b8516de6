"""Service for retrieving billing plan information."""

import asyncio

import stripe

from common.core.config import settings
from common.core.otel_axiom_exporter import trace_span, get_logger
from common.providers.caching.decorators import cache
from packages.billing.cache_keys import stripe_prices_key
from packages.billing.models.domain.enums import BillingInterval, PlanTier
from packages.billing.models.domain.plans import PlanInfo, PlanPrice, PlansResponse
from packages.billing.services.entitlement_service import get_plan_limits
from packages.billing.services.price_catalog import PriceCatalog

logger = get_logger(__name__)

# Plan metadata that doesn't come from Stripe or the enum
PLAN_METADATA = {
    PlanTier.FREE: {
        "name": "Free",
        "description": "Try it out on one location",
    },
    PlanTier.BASIC: {
        "name": "Basic",
        "description": "Automatic replies for a few locations",
    },
    PlanTier.PRO: {
        "name": "Pro",
        "description": "Unlimited replies with analytics",
    },
}


def _format_price(price_cents: int) -> str:
    price_dollars = price_cents / 100
    if price_cents == 0:
        return "$0"
    if price_dollars == int(price_dollars):
        return f"${int(price_dollars)}"
    return f"${price_dollars:.2f}"


class PlansService:
    """Service for retrieving plan information for upgrade prompts."""

    def __init__(self, price_catalog: PriceCatalog):
        self.price_catalog = price_catalog

    @trace_span
    async def get_all_plans(self) -> PlansResponse:
        """Get all plans with pricing and limits. Stripe amounts are cached for 1 hour."""
        stripe_prices = await self._fetch_stripe_prices_cached()
        return PlansResponse(
            plans=[self._build_plan_info(tier, stripe_prices) for tier in PlanTier]
        )

    def _build_plan_info(self, tier: PlanTier, stripe_prices: dict) -> PlanInfo:
        prices = []
        for interval in BillingInterval:
            price_id = None
            price_cents = tier.get_list_price_cents(interval)
            if tier.is_paid():
                price_id = self.price_catalog.get_stripe_price_id(tier, interval)
                price_cents = stripe_prices.get(price_id, price_cents)

            prices.append(
                PlanPrice(
                    interval=interval,
                    stripe_price_id=price_id,
                    price_cents=price_cents,
                    price_formatted=_format_price(price_cents),
                )
            )

        limits = get_plan_limits(tier)
        metadata = PLAN_METADATA[tier]

        return PlanInfo(
            tier=tier,
            name=metadata["name"],
            description=metadata["description"],
            prices=prices,
            limits=limits,
            features=self._build_features_list(tier),
        )

    def _build_features_list(self, tier: PlanTier) -> list[str]:
        """Build human-readable features list from limits."""
        limits = tier.get_limits()
        locations = limits["max_locations"]
        replies = limits["max_ai_replies_per_period"]

        features = [
            f"{locations} location{'s' if locations != 1 else ''}",
            "Unlimited AI replies" if replies < 0 else f"{replies:,} AI replies per month",
        ]
        if limits["auto_reply"]:
            features.append("Automatic replies by star rating")
        if limits["analytics"]:
            features.append("Review analytics")
        return features

    @cache(model_type=dict, ttl=3600, key_generator=stripe_prices_key)
    async def _fetch_stripe_prices_cached(self) -> dict:
        """
        Fetch prices from Stripe.

        Returns dict mapping price_id -> amount in cents. Prices that cannot be
        fetched are left out so the list price is used instead.
        """
        stripe.api_key = settings.stripe_secret_key
        if not stripe.api_key:
            logger.debug("Stripe secret key not configured, using list prices")
            return {}

        prices = {}
        for (tier, interval), price_id in self.price_catalog.items():
            try:
                price = await asyncio.to_thread(stripe.Price.retrieve, price_id)
                prices[price_id] = price.unit_amount or 0
            except stripe.StripeError as e:
                logger.warning(
                    f"Failed to fetch Stripe price {price_id}: {e}",
                    extra={
                        "price_id": price_id,
                        "plan_tier": tier.value,
                        "interval": interval.value,
                        "error": str(e),
                    },
                )

        return prices
