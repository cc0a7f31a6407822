"""Cohort models — scheduled, capacity-limited learning groups."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from melimou.db.base import TABLE_PREFIX, Base, prefixed, utcnow


class Cohort(Base):
    __tablename__ = prefixed("cohort")

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=True)  # null = ongoing
    max_members = Column(Integer, nullable=False, default=50)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)

    members = relationship("CohortMember", back_populates="cohort")


class CohortMember(Base):
    __tablename__ = prefixed("cohort_member")
    __table_args__ = (
        UniqueConstraint("cohort_id", "user_id", name=f"uq_{TABLE_PREFIX}cohort_member_cohort_user"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    cohort_id = Column(Integer, ForeignKey(f"{TABLE_PREFIX}cohort.id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey(f"{TABLE_PREFIX}user.id"), nullable=False, index=True)
    role = Column(String(20), nullable=False, default="member")  # member, leader, instructor
    is_active = Column(Boolean, nullable=False, default=True)
    joined_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    cohort = relationship("Cohort", back_populates="members")
