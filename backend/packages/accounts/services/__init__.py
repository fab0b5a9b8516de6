"""Account services."""

from packages.accounts.services.tenancy_service import TenancyService
from packages.accounts.services.location_service import LocationService
from packages.accounts.services.access_request_service import AccessRequestService

__all__ = [
    "TenancyService",
    "LocationService",
    "AccessRequestService",
]
