"""Database models for accounts."""

from packages.accounts.models.database.account import AccountEntity
from packages.accounts.models.database.membership import MembershipEntity
from packages.accounts.models.database.location import LocationEntity
from packages.accounts.models.database.access_request import AccessRequestEntity

__all__ = [
    "AccountEntity",
    "MembershipEntity",
    "LocationEntity",
    "AccessRequestEntity",
]
