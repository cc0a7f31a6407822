"""Curriculum Pydantic schemas — learning paths, modules, lessons, progress."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class LessonSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    module_id: int
    name: str
    description: str | None = None
    order_index: int
    estimated_duration: int | None = None
    required_subscription_tier: str


class LessonResponse(LessonSummary):
    content: Any = None


class ModuleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    learning_path_id: int
    name: str
    description: str | None = None
    order_index: int
    estimated_duration: int | None = None
    lessons: list[LessonSummary] = []


class LearningPathResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    difficulty: str
    is_public: bool
    required_subscription_tier: str
    created_at: datetime
    modules: list[ModuleResponse] = []


class LessonDetailResponse(LessonResponse):
    module_name: str
    learning_path_id: int
    learning_path_name: str


class LearningPathCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: str | None = None
    difficulty: str = "beginner"
    is_public: bool = True
    required_subscription_tier: str = "free"


class LearningPathUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    difficulty: str | None = None
    is_public: bool | None = None
    required_subscription_tier: str | None = None


class ModuleCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: str | None = None
    order_index: int
    estimated_duration: int | None = None


class LessonCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: str | None = None
    content: Any = None
    order_index: int
    estimated_duration: int | None = None
    required_subscription_tier: str = "free"


class LessonUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    content: Any = None
    order_index: int | None = None
    estimated_duration: int | None = None
    required_subscription_tier: str | None = None


class CompleteLessonRequest(BaseModel):
    score: int | None = Field(default=None, ge=0, le=100)
    time_spent: int | None = Field(default=None, ge=0)


class ProgressResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    lesson_id: int
    status: str
    score: int | None = None
    time_spent: int | None = None
    completed_at: datetime | None = None
