"""
Database entity for subscriptions.
"""

from sqlalchemy import Column, String, DateTime, ForeignKey, Index, JSON
from sqlalchemy.sql import func

from common.db.base import Base, new_uuid


class SubscriptionEntity(Base):
    """
    User subscription database entity.

    Stores plan tier, status, Stripe ids and feature overrides.
    One-to-one relationship with users table. Written only by the billing sync.
    """

    __tablename__ = "subscriptions"

    id = Column(String(36), primary_key=True, default=new_uuid)
    user_id = Column(
        String(255),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )

    plan_tier = Column(String(20), nullable=False, server_default="free")  # free, basic, pro
    status = Column(String(50), nullable=False, server_default="active", index=True)

    # Stripe ids
    stripe_customer_id = Column(String(255), nullable=True, index=True)
    stripe_subscription_id = Column(String(255), nullable=True, unique=True)
    stripe_price_id = Column(String(255), nullable=True)

    # Sparse {feature: bool} map; a present key wins over the tier default
    feature_overrides = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (Index("idx_subscription_user_status", "user_id", "status"),)
