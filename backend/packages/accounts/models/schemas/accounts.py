from typing import List, Optional
from pydantic import BaseModel, Field

from packages.accounts.models.domain.access_request import PendingAccessRequest
from packages.accounts.models.domain.account import Account
from packages.accounts.models.domain.location import Location
from packages.accounts.models.domain.membership import AccountMember, Membership


class AccountListResponse(BaseModel):
    accounts: List[Account]


class AccessResponse(BaseModel):
    account_id: str
    has_access: bool


class MergeResponse(BaseModel):
    """Result of joining an account. ``membership`` is None when already a member."""

    account_id: str
    already_member: bool
    membership: Optional[Membership] = None


class LocationListResponse(BaseModel):
    locations: List[Location]


class MemberListResponse(BaseModel):
    members: List[AccountMember]


class AccessRequestCreateRequest(BaseModel):
    message: Optional[str] = Field(None, max_length=1000)


class AccessRequestListResponse(BaseModel):
    requests: List[PendingAccessRequest]


class PendingCountResponse(BaseModel):
    count: int
