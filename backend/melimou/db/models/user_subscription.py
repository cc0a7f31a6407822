"""UserSubscription model — a user's enrolment in a plan for a billing period."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import relationship

from melimou.db.base import TABLE_PREFIX, Base, prefixed, utcnow

ACTIVE_STATUS = "active"


class UserSubscription(Base):
    __tablename__ = prefixed("user_subscription")
    __table_args__ = (
        # At most one active subscription per user
        Index(
            f"uq_{TABLE_PREFIX}user_subscription_one_active",
            "user_id",
            unique=True,
            postgresql_where=text(f"status = '{ACTIVE_STATUS}'"),
            sqlite_where=text(f"status = '{ACTIVE_STATUS}'"),
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey(f"{TABLE_PREFIX}user.id"), nullable=False, index=True)
    plan_id = Column(Integer, ForeignKey(f"{TABLE_PREFIX}subscription_plan.id"), nullable=False)
    stripe_subscription_id = Column(String(255), nullable=True)

    status = Column(String(20), nullable=False)  # active, inactive, cancelled, past_due, trialing
    current_period_start = Column(DateTime(timezone=True), nullable=False)
    current_period_end = Column(DateTime(timezone=True), nullable=False)
    cancel_at_period_end = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)

    user = relationship("User", back_populates="subscriptions")
    plan = relationship("SubscriptionPlan", back_populates="subscriptions", lazy="joined")
