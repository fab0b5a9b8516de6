"""Account repositories."""

from packages.accounts.repositories.account_repository import AccountRepository
from packages.accounts.repositories.membership_repository import MembershipRepository
from packages.accounts.repositories.location_repository import LocationRepository
from packages.accounts.repositories.access_request_repository import (
    AccessRequestRepository,
)

__all__ = [
    "AccountRepository",
    "MembershipRepository",
    "LocationRepository",
    "AccessRequestRepository",
]
