from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from common.db.base import Base, new_uuid


class AccountEntity(Base):
    """
    Billing/ownership boundary.

    Memberships and locations are removed by the database cascade when the
    account row is deleted.
    """

    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=new_uuid)
    name = Column(String, nullable=False)
    # Email of the connected business profile
    email = Column(String, nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    memberships = relationship(
        "MembershipEntity", back_populates="account", passive_deletes=True
    )
    locations = relationship(
        "LocationEntity", back_populates="account", passive_deletes=True
    )
