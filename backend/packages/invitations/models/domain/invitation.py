"""
Domain models for invitations.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from pydantic import BaseModel, field_validator


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Some drivers hand back naive datetimes for timestamptz columns
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class InvitationStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


class Invitation(BaseModel):
    id: str
    token: str
    location_id: str
    email: str
    invited_by_user_id: str
    status: InvitationStatus
    expires_at: datetime
    accepted_by_user_id: Optional[str] = None
    accepted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @field_validator("expires_at", "accepted_at", "created_at")
    @classmethod
    def validate_timezone(cls, v):
        return _as_utc(v)

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def effective_status(self, now: datetime) -> InvitationStatus:
        """Stored status, with a lapsed pending invitation reported as expired."""
        if self.status == InvitationStatus.PENDING and self.is_expired(now):
            return InvitationStatus.EXPIRED
        return self.status


class InvitationCreateModel(BaseModel):
    """Model for creating an invitation row."""

    token: str
    location_id: str
    email: str
    invited_by_user_id: str
    expires_at: datetime


class InvitationPreview(BaseModel):
    """What the invitation landing page may show before the user signs in."""

    location_id: str
    location_name: str
    status: InvitationStatus
    expires_at: datetime
