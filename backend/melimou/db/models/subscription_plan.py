"""SubscriptionPlan model — catalog of purchasable plans."""

from sqlalchemy import Boolean, Column, DateTime, Integer, JSON, String, Text
from sqlalchemy.orm import relationship

from melimou.db.base import Base, prefixed, utcnow


class SubscriptionPlan(Base):
    __tablename__ = prefixed("subscription_plan")

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)  # "Free", "Pro", "Premium", ...
    description = Column(Text, nullable=True)

    # Pricing (cents)
    price = Column(Integer, nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    interval_type = Column(String(10), nullable=False)  # month, year
    interval_count = Column(Integer, nullable=False, default=1)
    stripe_price_id = Column(String(255), nullable=True)

    features = Column(JSON, nullable=True)

    # Limits (-1 = unlimited)
    max_sessions = Column(Integer, nullable=True, default=-1)
    max_resources = Column(Integer, nullable=True, default=-1)

    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    subscriptions = relationship("UserSubscription", back_populates="plan")
