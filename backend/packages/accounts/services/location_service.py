"""
Service for locations.

Every operation checks account membership first. Creating a location also
checks the plan's location limit.
"""

from typing import List

from common.core.exceptions import NotFoundError, QuotaExceeded
from common.core.otel_axiom_exporter import trace_span, get_logger
from packages.accounts.repositories.location_repository import LocationRepository
from packages.accounts.services.tenancy_service import TenancyService
from packages.accounts.models.domain.location import (
    Location,
    LocationCreateModel,
    LocationConfigUpdateModel,
)
from packages.billing.services.quota_service import QuotaService

logger = get_logger(__name__)


class LocationService:
    """Service for location management."""

    def __init__(self):
        self.location_repo = LocationRepository()
        self.tenancy_service = TenancyService()
        self.quota_service = QuotaService()

    @trace_span
    async def create_location(
        self, user_id: str, create_model: LocationCreateModel
    ) -> Location:
        await self.tenancy_service.require_access(user_id, create_model.account_id)

        quota = await self.quota_service.check_location_quota(user_id)
        if not quota.allowed:
            logger.warning(
                f"User {user_id} reached location limit",
                extra={"user_id": user_id, "limit": quota.limit},
            )
            raise QuotaExceeded(
                f"Location limit reached ({quota.limit}). Upgrade your plan to add more."
            )

        location = await self.location_repo.create(create_model)

        logger.info(
            f"Created location {location.id} in account {location.account_id}",
            extra={
                "user_id": user_id,
                "account_id": location.account_id,
                "location_id": location.id,
            },
        )
        return location

    @trace_span
    async def list_account_locations(
        self, user_id: str, account_id: str
    ) -> List[Location]:
        await self.tenancy_service.require_access(user_id, account_id)
        return await self.location_repo.list_by_account(account_id)

    @trace_span
    async def get_location_for_user(self, user_id: str, location_id: str) -> Location:
        """Location by id, checked through its owning account."""
        location = await self.location_repo.get(location_id)
        if location is None:
            raise NotFoundError(f"Location {location_id} not found")

        await self.tenancy_service.require_access(user_id, location.account_id)
        return location

    @trace_span
    async def update_location_config(
        self, user_id: str, location_id: str, update_model: LocationConfigUpdateModel
    ) -> Location:
        await self.get_location_for_user(user_id, location_id)
        return await self.location_repo.update(location_id, update_model)
