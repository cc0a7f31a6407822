"""Resource model — downloadable and linked study material."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, JSON, String, Text

from melimou.db.base import TABLE_PREFIX, Base, prefixed, utcnow


class Resource(Base):
    __tablename__ = prefixed("resource")

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    type = Column(String(20), nullable=False)  # pdf, video, audio, link, text
    url = Column(String(1000), nullable=False)
    difficulty = Column(String(20), nullable=True)  # beginner, intermediate, advanced
    tags = Column(JSON, nullable=True)
    is_public = Column(Boolean, nullable=False, default=True)
    required_subscription_tier = Column(String(20), nullable=False, default="free")
    uploaded_by = Column(String(36), ForeignKey(f"{TABLE_PREFIX}user.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
