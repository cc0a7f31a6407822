"""Message model — community chat and forum posts."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text

from melimou.db.base import TABLE_PREFIX, Base, prefixed, utcnow


class Message(Base):
    __tablename__ = prefixed("message")

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey(f"{TABLE_PREFIX}user.id"), nullable=False, index=True)
    cohort_id = Column(Integer, ForeignKey(f"{TABLE_PREFIX}cohort.id"), nullable=True, index=True)  # null = global room
    content = Column(Text, nullable=False)
    message_type = Column(String(20), nullable=False, default="chat")  # chat, forum, announcement
    parent_id = Column(Integer, ForeignKey(f"{TABLE_PREFIX}message.id"), nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
