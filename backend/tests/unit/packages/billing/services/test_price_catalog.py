import pytest

from common.core.config import Settings
from common.core.exceptions import ConfigurationError, InvalidPlanError
from packages.billing.models.domain.enums import BillingInterval, PlanTier
from packages.billing.services.price_catalog import PriceCatalog
from tests.conftest import TEST_PRICE_IDS


class TestPriceCatalogValidation:
    def test_missing_price_id_fails_fast(self):
        price_ids = dict(TEST_PRICE_IDS)
        price_ids[(PlanTier.PRO, BillingInterval.YEARLY)] = None

        with pytest.raises(ConfigurationError) as exc_info:
            PriceCatalog(price_ids)

        assert "STRIPE_PRICE_ID_PRO_YEARLY" in str(exc_info.value)

    def test_all_missing_names_reported(self):
        with pytest.raises(ConfigurationError) as exc_info:
            PriceCatalog({})

        message = str(exc_info.value)
        for name in (
            "STRIPE_PRICE_ID_BASIC_MONTHLY",
            "STRIPE_PRICE_ID_BASIC_YEARLY",
            "STRIPE_PRICE_ID_PRO_MONTHLY",
            "STRIPE_PRICE_ID_PRO_YEARLY",
        ):
            assert name in message

    def test_price_id_shared_across_plans_rejected(self):
        price_ids = dict(TEST_PRICE_IDS)
        price_ids[(PlanTier.PRO, BillingInterval.MONTHLY)] = "price_basic_monthly"

        with pytest.raises(ConfigurationError):
            PriceCatalog(price_ids)

    def test_from_settings(self):
        config = Settings(
            stripe_price_id_basic_monthly="pb_m",
            stripe_price_id_basic_yearly="pb_y",
            stripe_price_id_pro_monthly="pp_m",
            stripe_price_id_pro_yearly="pp_y",
        )

        catalog = PriceCatalog.from_settings(config)

        assert catalog.get_stripe_price_id("pro", "yearly") == "pp_y"

    def test_from_settings_without_prices_fails(self):
        config = Settings(
            stripe_price_id_basic_monthly=None,
            stripe_price_id_basic_yearly=None,
            stripe_price_id_pro_monthly=None,
            stripe_price_id_pro_yearly=None,
        )

        with pytest.raises(ConfigurationError):
            PriceCatalog.from_settings(config)


class TestPriceLookups:
    @pytest.mark.parametrize("key,price_id", list(TEST_PRICE_IDS.items()))
    def test_each_price_id_maps_to_its_tier(self, price_catalog, key, price_id):
        assert price_catalog.get_plan_tier_from_price_id(price_id) == key[0]

    @pytest.mark.parametrize("price_id", [None, "", "price_unknown"])
    def test_unknown_price_id_is_free(self, price_catalog, price_id):
        assert price_catalog.get_plan_tier_from_price_id(price_id) == PlanTier.FREE

    def test_get_stripe_price_id(self, price_catalog):
        assert (
            price_catalog.get_stripe_price_id(PlanTier.BASIC, BillingInterval.MONTHLY)
            == "price_basic_monthly"
        )

    @pytest.mark.parametrize(
        "plan,interval",
        [("enterprise", "monthly"), ("pro", "weekly"), ("free", "monthly")],
    )
    def test_invalid_plan_interval(self, price_catalog, plan, interval):
        with pytest.raises(InvalidPlanError):
            price_catalog.get_stripe_price_id(plan, interval)
