"""Alert model — global and per-user notifications."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text

from melimou.db.base import TABLE_PREFIX, Base, prefixed, utcnow


class Alert(Base):
    __tablename__ = prefixed("alert")

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(20), nullable=False, default="info")  # info, warning, error, success
    target_user_id = Column(String(36), ForeignKey(f"{TABLE_PREFIX}user.id"), nullable=True, index=True)  # null = global
    created_by = Column(String(36), ForeignKey(f"{TABLE_PREFIX}user.id"), nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
