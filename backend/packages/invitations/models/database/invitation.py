from sqlalchemy import Column, String, DateTime, ForeignKey, Index
from sqlalchemy.sql import func

from common.db.base import Base, new_uuid


class InvitationEntity(Base):
    """
    Location invitation.

    Lifecycle: pending -> accepted | cancelled | expired. Terminal states are
    never reopened; every transition is a conditional update on status.
    """

    __tablename__ = "invitations"

    id = Column(String(36), primary_key=True, default=new_uuid)
    token = Column(String(64), nullable=False, unique=True, index=True)
    location_id = Column(
        String(36),
        ForeignKey("locations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    email = Column(String, nullable=False)
    invited_by_user_id = Column(
        String(255), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    status = Column(String(20), nullable=False, server_default="pending")
    expires_at = Column(DateTime(timezone=True), nullable=False)

    accepted_by_user_id = Column(
        String(255), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    accepted_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (Index("idx_invitation_location_status", "location_id", "status"),)
