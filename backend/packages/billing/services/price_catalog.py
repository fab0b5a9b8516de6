"""
Stripe price catalog.

Maps each paid (plan, interval) pair to the Stripe price id configured for it.
The catalog is validated exhaustively when it is built: a missing price id is
an operator misconfiguration and must stop the service from starting, rather
than silently resolving every paying user to the free tier.
"""

from typing import Dict, Iterator, Mapping, Optional, Tuple, Union

from common.core.config import Settings, settings
from common.core.exceptions import ConfigurationError, InvalidPlanError
from common.core.otel_axiom_exporter import get_logger
from packages.billing.models.domain.enums import BillingInterval, PlanTier

logger = get_logger(__name__)

PlanKey = Tuple[PlanTier, BillingInterval]

PAID_PLAN_KEYS: Tuple[PlanKey, ...] = (
    (PlanTier.BASIC, BillingInterval.MONTHLY),
    (PlanTier.BASIC, BillingInterval.YEARLY),
    (PlanTier.PRO, BillingInterval.MONTHLY),
    (PlanTier.PRO, BillingInterval.YEARLY),
)


def _settings_field(key: PlanKey) -> str:
    plan, interval = key
    return f"stripe_price_id_{plan.value}_{interval.value}"


def env_var_name(key: PlanKey) -> str:
    return _settings_field(key).upper()


class PriceCatalog:
    """Validated (plan, interval) <-> Stripe price id map."""

    def __init__(self, price_ids: Mapping[PlanKey, Optional[str]]):
        missing = [env_var_name(key) for key in PAID_PLAN_KEYS if not price_ids.get(key)]
        if missing:
            raise ConfigurationError(
                f"Missing required Stripe price ID environment variable(s): {', '.join(missing)}"
            )

        self._price_ids: Dict[PlanKey, str] = {
            key: price_ids[key] for key in PAID_PLAN_KEYS
        }

        self._tiers: Dict[str, PlanTier] = {}
        for key, price_id in self._price_ids.items():
            if price_id in self._tiers and self._tiers[price_id] != key[0]:
                raise ConfigurationError(
                    f"Stripe price ID {price_id} is configured for more than one plan"
                )
            self._tiers[price_id] = key[0]

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "PriceCatalog":
        return cls({key: getattr(config, _settings_field(key)) for key in PAID_PLAN_KEYS})

    def get_plan_tier_from_price_id(self, price_id: Optional[str]) -> PlanTier:
        """Tier for a Stripe price id. Unknown or absent ids resolve to free."""
        if not price_id:
            return PlanTier.FREE
        return self._tiers.get(price_id, PlanTier.FREE)

    def get_stripe_price_id(
        self,
        plan: Union[PlanTier, str],
        interval: Union[BillingInterval, str],
    ) -> str:
        try:
            key = (PlanTier(plan), BillingInterval(interval))
        except ValueError as e:
            raise InvalidPlanError(
                f"Invalid plan/interval combination: {plan}/{interval}"
            ) from e

        price_id = self._price_ids.get(key)
        if price_id is None:
            raise InvalidPlanError(f"Invalid plan/interval combination: {plan}/{interval}")
        return price_id

    def items(self) -> Iterator[Tuple[PlanKey, str]]:
        return iter(self._price_ids.items())


_catalog: Optional[PriceCatalog] = None


def get_price_catalog() -> PriceCatalog:
    """Process-wide catalog built from settings on first call."""
    global _catalog

    if _catalog is None:
        _catalog = PriceCatalog.from_settings()
        logger.info("Stripe price catalog loaded")

    return _catalog
