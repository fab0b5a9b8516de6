"""
Unit tests for billing API routes.
"""

from packages.billing.services.price_catalog import get_price_catalog
from api.main import app
from tests.conftest import create_subscription


class TestBillingRoutes:
    async def test_subscription_without_row_is_free(self, client):
        response = await client.get("/api/v1/billing/subscription")

        assert response.status_code == 200
        data = response.json()
        assert data["plan_tier"] == "free"
        assert data["status"] is None
        assert data["has_paid_subscription"] is False
        assert data["limits"]["max_locations"] == 1

    async def test_subscription_status(self, client, sample_subscription):
        response = await client.get("/api/v1/billing/subscription")

        data = response.json()
        assert data["plan_tier"] == "pro"
        assert data["status"] == "active"
        assert data["has_paid_subscription"] is True

    async def test_unlisted_subscription_status(self, client, test_db, user_entity):
        await create_subscription(test_db, user_entity.id, status="revoked")

        response = await client.get("/api/v1/billing/subscription")

        assert response.status_code == 200
        data = response.json()
        assert data["plan_tier"] == "free"
        assert data["status"] == "revoked"
        assert data["has_paid_subscription"] is False

        quota = await client.get("/api/v1/billing/quota")
        assert quota.status_code == 200

    async def test_limits(self, client, sample_subscription):
        response = await client.get("/api/v1/billing/limits")

        assert response.status_code == 200
        assert response.json()["max_ai_replies_per_period"] == -1

    async def test_feature_denial_is_not_an_error(self, client):
        response = await client.get("/api/v1/billing/features/analytics")

        assert response.status_code == 200
        assert response.json() == {
            "feature": "analytics",
            "has_access": False,
            "reason": "denied",
            "required_plan": "pro",
        }

    async def test_unknown_feature(self, client):
        response = await client.get("/api/v1/billing/features/teleport")

        assert response.status_code == 422

    async def test_period(self, client):
        response = await client.get("/api/v1/billing/period")

        assert response.status_code == 200
        data = response.json()
        assert data["end"] == data["reset_date"]

    async def test_quota(self, client, sample_location):
        response = await client.get("/api/v1/billing/quota")

        assert response.status_code == 200
        data = response.json()
        assert data["ai_replies"]["limit"] == 5
        assert data["locations"]["current_usage"] == 1
        assert data["locations"]["allowed"] is False


class TestPlansRoute:
    async def test_plans_are_public(self, client):
        response = await client.get("/api/v1/billing/plans", headers={"X-User-Id": ""})

        assert response.status_code == 200
        tiers = [plan["tier"] for plan in response.json()["plans"]]
        assert tiers == ["free", "basic", "pro"]

    async def test_uses_injected_catalog(self, client):
        assert get_price_catalog in app.dependency_overrides

        response = await client.get("/api/v1/billing/plans")

        pro = response.json()["plans"][2]
        assert {p["stripe_price_id"] for p in pro["prices"]} == {
            "price_pro_monthly",
            "price_pro_yearly",
        }
