"""Curriculum models — LearningPath → Module → Lesson."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import relationship

from melimou.db.base import TABLE_PREFIX, Base, prefixed, utcnow


class LearningPath(Base):
    __tablename__ = prefixed("learning_path")

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    difficulty = Column(String(20), nullable=False)  # beginner, intermediate, advanced
    is_public = Column(Boolean, nullable=False, default=True)
    required_subscription_tier = Column(String(20), nullable=False, default="free")

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)

    modules = relationship(
        "Module",
        back_populates="learning_path",
        order_by="Module.order_index",
        cascade="all, delete-orphan",
    )


class Module(Base):
    __tablename__ = prefixed("module")

    id = Column(Integer, primary_key=True, autoincrement=True)
    learning_path_id = Column(Integer, ForeignKey(f"{TABLE_PREFIX}learning_path.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    order_index = Column(Integer, nullable=False)
    estimated_duration = Column(Integer, nullable=True)  # minutes

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)

    learning_path = relationship("LearningPath", back_populates="modules")
    lessons = relationship(
        "Lesson",
        back_populates="module",
        order_by="Lesson.order_index",
        cascade="all, delete-orphan",
    )


class Lesson(Base):
    __tablename__ = prefixed("lesson")

    id = Column(Integer, primary_key=True, autoincrement=True)
    module_id = Column(Integer, ForeignKey(f"{TABLE_PREFIX}module.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    content = Column(JSON, nullable=True)  # text blocks, audio/video URLs, exercises
    order_index = Column(Integer, nullable=False)
    estimated_duration = Column(Integer, nullable=True)  # minutes
    required_subscription_tier = Column(String(20), nullable=False, default="free")

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)

    module = relationship("Module", back_populates="lessons")
