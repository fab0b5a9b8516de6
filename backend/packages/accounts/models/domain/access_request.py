"""
Domain models for account access requests.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from packages.accounts.models.domain.enums import AccessRequestStatus


class AccessRequest(BaseModel):
    id: str
    account_id: str
    requester_id: str
    status: AccessRequestStatus
    message: Optional[str] = None
    reviewed_by_user_id: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AccessRequestCreateModel(BaseModel):
    account_id: str
    requester_id: str
    message: Optional[str] = None


class PendingAccessRequest(AccessRequest):
    """A pending request with the requester's identity for the review screen."""

    requester_email: str
    requester_name: Optional[str] = None
