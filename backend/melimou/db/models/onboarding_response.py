"""OnboardingResponse model — write-once audit row per onboarding question."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, JSON, String

from melimou.db.base import TABLE_PREFIX, Base, prefixed, utcnow


class OnboardingResponse(Base):
    __tablename__ = prefixed("onboarding_response")

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey(f"{TABLE_PREFIX}user.id"), nullable=False, index=True)
    question_key = Column(String(100), nullable=False)
    response = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
