from sqlalchemy import Column, String, DateTime, ForeignKey, Index, Text
from sqlalchemy.sql import func

from common.db.base import Base, new_uuid


class AccessRequestEntity(Base):
    """
    A user's request to join an account.

    Lifecycle: pending -> approved | rejected. Decided requests are never
    reopened; a new request is a new row.
    """

    __tablename__ = "access_requests"

    id = Column(String(36), primary_key=True, default=new_uuid)
    account_id = Column(
        String(36),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    requester_id = Column(
        String(255),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status = Column(String(20), nullable=False, server_default="pending")
    message = Column(Text, nullable=True)

    reviewed_by_user_id = Column(
        String(255), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    reviewed_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("idx_access_request_account_status", "account_id", "status"),
    )
