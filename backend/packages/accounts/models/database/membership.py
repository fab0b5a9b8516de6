from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from common.db.base import Base


class MembershipEntity(Base):
    """User to account relation. At most one row per (user_id, account_id)."""

    __tablename__ = "memberships"

    user_id = Column(
        String(255),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    account_id = Column(
        String(36),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    role = Column(String(20), nullable=False, server_default="member")  # owner, member
    added_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    account = relationship("AccountEntity", back_populates="memberships")
