"""
Domain models for memberships.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from packages.accounts.models.domain.enums import MembershipRole


class Membership(BaseModel):
    user_id: str
    account_id: str
    role: MembershipRole
    added_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MembershipCreateModel(BaseModel):
    """Model for creating a membership."""

    user_id: str
    account_id: str
    role: MembershipRole = MembershipRole.MEMBER


class AccountMember(Membership):
    """A membership joined with the member's identity."""

    email: str
    name: Optional[str] = None
