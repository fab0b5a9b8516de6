"""
Domain models for usage tracking and quotas.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from packages.billing.models.domain.enums import UNLIMITED, UsageEventType


class QuotaCheck(BaseModel):
    """
    Result of a quota check.

    A limit of -1 means unlimited; ``remaining`` is then -1 as well.
    """

    allowed: bool
    metric_name: str
    current_usage: int
    limit: int
    remaining: int
    percentage_used: float
    warning_threshold_reached: bool  # True if >= 80% used
    period_end: datetime

    def is_unlimited(self) -> bool:
        return self.limit == UNLIMITED

    def get_user_message(self) -> Optional[str]:
        """Get user-friendly message about quota status."""
        if not self.allowed:
            return f"Monthly {self.metric_name} limit reached ({self.limit:,}). Upgrade to continue."

        if self.warning_threshold_reached:
            return f"You've used {self.percentage_used:.0f}% of your monthly {self.metric_name} quota ({self.current_usage:,}/{self.limit:,})."

        return None


class UsageEvent(BaseModel):
    id: int
    user_id: str
    location_id: Optional[str] = None
    event_type: UsageEventType
    quantity: int = 1
    created_at: datetime

    class Config:
        from_attributes = True


class UsageEventCreateModel(BaseModel):
    """Model for creating a usage event."""

    user_id: str
    location_id: Optional[str] = None
    event_type: UsageEventType
    quantity: int = 1

    class Config:
        use_enum_values = True
