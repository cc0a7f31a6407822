"""UserProgress model — one row per (user, lesson)."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint

from melimou.db.base import TABLE_PREFIX, Base, prefixed, utcnow


class UserProgress(Base):
    __tablename__ = prefixed("user_progress")
    __table_args__ = (
        UniqueConstraint("user_id", "lesson_id", name=f"uq_{TABLE_PREFIX}user_progress_user_lesson"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey(f"{TABLE_PREFIX}user.id"), nullable=False, index=True)
    lesson_id = Column(Integer, ForeignKey(f"{TABLE_PREFIX}lesson.id"), nullable=False)
    status = Column(String(20), nullable=False, default="not_started")  # not_started, in_progress, completed
    completed_at = Column(DateTime(timezone=True), nullable=True)
    score = Column(Integer, nullable=True)  # 0-100
    time_spent = Column(Integer, nullable=True)  # minutes

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)
