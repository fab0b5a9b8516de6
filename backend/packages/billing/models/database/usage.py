"""
Database entity for usage events.
"""

from sqlalchemy import Column, String, DateTime, ForeignKey, Index, Integer
from sqlalchemy.sql import func

from common.db.base import Base, BigIntegerType


class UsageEventEntity(Base):
    """
    Usage event database entity.

    One row per metered action, counted inside the calendar-month billing period.
    """

    __tablename__ = "usage_events"

    id = Column(BigIntegerType, primary_key=True, index=True, autoincrement=True)
    user_id = Column(
        String(255),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    location_id = Column(
        String(36),
        ForeignKey("locations.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    event_type = Column(String(50), nullable=False, index=True)  # ai_reply
    quantity = Column(Integer, nullable=False, server_default="1")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    __table_args__ = (
        Index("idx_usage_user_type_date", "user_id", "event_type", "created_at"),
    )
