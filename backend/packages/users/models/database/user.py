from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func

from common.db.base import Base


class UserEntity(Base):
    """Identity mirrored from the gateway. Read-only here; exists for foreign keys."""

    __tablename__ = "users"

    id = Column(String(255), primary_key=True)
    email = Column(String, nullable=False, index=True)
    name = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
