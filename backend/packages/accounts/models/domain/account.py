"""
Domain models for accounts.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class Account(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AccountCreateModel(BaseModel):
    """Model for creating a new account."""

    name: str = Field(min_length=1, max_length=255)
    email: Optional[str] = None


class AccountSnapshot(BaseModel):
    """
    Account with its full location and membership counts.

    Read once per account during orphan cleanup. The counts may be stale by
    the time a delete is issued.
    """

    id: str
    location_count: int
    membership_count: int

    def is_orphaned(self) -> bool:
        """Empty account whose only remaining member is the caller."""
        return self.location_count == 0 and self.membership_count == 1
