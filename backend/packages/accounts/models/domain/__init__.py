"""Domain models for accounts."""

from packages.accounts.models.domain.enums import (
    MembershipRole,
    AccessRequestStatus,
    ToneOfVoice,
    LanguageMode,
)
from packages.accounts.models.domain.account import (
    Account,
    AccountCreateModel,
    AccountSnapshot,
)
from packages.accounts.models.domain.membership import (
    AccountMember,
    Membership,
    MembershipCreateModel,
)
from packages.accounts.models.domain.access_request import (
    AccessRequest,
    AccessRequestCreateModel,
    PendingAccessRequest,
)
from packages.accounts.models.domain.location import (
    Location,
    LocationCreateModel,
    LocationConfigUpdateModel,
    StarConfig,
)

__all__ = [
    # Enums
    "MembershipRole",
    "AccessRequestStatus",
    "ToneOfVoice",
    "LanguageMode",
    # Account
    "Account",
    "AccountCreateModel",
    "AccountSnapshot",
    # Membership
    "AccountMember",
    "Membership",
    "MembershipCreateModel",
    # Access requests
    "AccessRequest",
    "AccessRequestCreateModel",
    "PendingAccessRequest",
    # Location
    "Location",
    "LocationCreateModel",
    "LocationConfigUpdateModel",
    "StarConfig",
]
