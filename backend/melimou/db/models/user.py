"""User model — identity, learner profile, and denormalized subscription state."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, Integer, JSON, String, Text
from sqlalchemy.orm import relationship

from melimou.db.base import Base, prefixed, utcnow


class User(Base):
    __tablename__ = prefixed("user")

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    email_verified = Column(DateTime(timezone=True), nullable=True)
    image = Column(String(500), nullable=True)
    password_hash = Column(String(255), nullable=True)  # bcrypt; null for OAuth-only users

    role = Column(String(20), nullable=False, default="student")  # student, instructor, admin
    formality_preference = Column(String(20), nullable=True, default="mixed")  # informal, formal, mixed
    age = Column(Integer, nullable=True)
    gender = Column(String(30), nullable=True)

    # Onboarding
    has_completed_onboarding = Column(Boolean, nullable=False, default=False)
    greek_level = Column(String(30), nullable=True)
    learning_goals = Column(JSON, nullable=True)
    study_time_per_week = Column(Integer, nullable=True)  # hours
    previous_experience = Column(Text, nullable=True)
    interests = Column(JSON, nullable=True)
    how_heard_about_us = Column(String(255), nullable=True)
    wants_practice_test = Column(Boolean, nullable=True, default=False)

    # Subscription (denormalized from the active UserSubscription)
    subscription_tier = Column(String(20), nullable=False, default="free")  # free, pro, premium
    subscription_status = Column(String(20), nullable=True, default="active")  # active, inactive, cancelled, past_due
    subscription_start_date = Column(DateTime(timezone=True), nullable=True)
    subscription_end_date = Column(DateTime(timezone=True), nullable=True)
    stripe_customer_id = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)

    subscriptions = relationship(
        "UserSubscription",
        back_populates="user",
        order_by="UserSubscription.created_at.desc()",
    )
