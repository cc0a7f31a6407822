"""Tutor models — practice conversation sessions and their messages."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import relationship

from melimou.db.base import TABLE_PREFIX, Base, prefixed, utcnow


class TutorSession(Base):
    __tablename__ = prefixed("tutor_session")

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey(f"{TABLE_PREFIX}user.id"), nullable=False, index=True)
    topic = Column(String(255), nullable=True)
    formality_level = Column(String(20), nullable=False, default="mixed")  # informal, formal, mixed
    status = Column(String(20), nullable=False, default="active")  # active, completed, abandoned
    messages_count = Column(Integer, nullable=False, default=0)
    started_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    ended_at = Column(DateTime(timezone=True), nullable=True)

    messages = relationship(
        "TutorMessage",
        back_populates="session",
        order_by="TutorMessage.id",
    )


class TutorMessage(Base):
    __tablename__ = prefixed("tutor_message")

    id = Column(Integer, primary_key=True, autoincrement=True)
    session_id = Column(Integer, ForeignKey(f"{TABLE_PREFIX}tutor_session.id"), nullable=False, index=True)
    role = Column(String(20), nullable=False)  # user, assistant
    content = Column(Text, nullable=False)
    feedback = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    session = relationship("TutorSession", back_populates="messages")
