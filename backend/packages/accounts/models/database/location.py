from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from common.db.base import Base, new_uuid


class LocationEntity(Base):
    """Managed business location with its reply configuration."""

    __tablename__ = "locations"

    id = Column(String(36), primary_key=True, default=new_uuid)
    account_id = Column(
        String(36),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String, nullable=False)
    address = Column(String, nullable=True)
    google_location_id = Column(String, nullable=True, unique=True, index=True)

    # Reply configuration
    tone_of_voice = Column(String(20), nullable=False, server_default="friendly")
    language_mode = Column(String(20), nullable=False, server_default="auto_detect")
    max_sentences = Column(Integer, nullable=True)
    signature = Column(String, nullable=True)
    # {"1": {"custom_instructions": "", "auto_reply": false}, ..., "5": {...}}
    star_configs = Column(JSON, nullable=False)
    qr_style = Column(JSON, nullable=True)
    breadcrumb = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())

    account = relationship("AccountEntity", back_populates="locations")
