"""Community Pydantic schemas — chat, alerts, resources, cohorts."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class MessageCreate(BaseModel):
    content: str = Field(..., min_length=1)
    cohort_id: int | None = None
    message_type: Literal["chat", "forum", "announcement"] = "chat"
    parent_id: int | None = None


class MessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    cohort_id: int | None = None
    content: str
    message_type: str
    parent_id: int | None = None
    created_at: datetime


class AlertCreate(BaseModel):
    title: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    type: Literal["info", "warning", "error", "success"] = "info"
    target_user_id: str | None = None
    expires_at: datetime | None = None


class AlertResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    message: str
    type: str
    target_user_id: str | None = None
    created_by: str | None = None
    is_read: bool
    expires_at: datetime | None = None
    created_at: datetime


class MarkAllReadResponse(BaseModel):
    updated: int


class ResourceCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: str | None = None
    type: Literal["pdf", "video", "audio", "link", "text"]
    url: str = Field(..., min_length=1)
    difficulty: Literal["beginner", "intermediate", "advanced"] | None = None
    tags: list[str] = Field(default_factory=list)
    is_public: bool = True
    required_subscription_tier: str = "free"


class ResourceUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    type: Literal["pdf", "video", "audio", "link", "text"] | None = None
    url: str | None = None
    difficulty: Literal["beginner", "intermediate", "advanced"] | None = None
    tags: list[str] | None = None
    is_public: bool | None = None
    required_subscription_tier: str | None = None


class ResourceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    type: str
    url: str
    difficulty: str | None = None
    tags: list[str] | None = None
    is_public: bool
    required_subscription_tier: str
    uploaded_by: str
    created_at: datetime


class CohortResponse(BaseModel):
    id: int
    name: str
    description: str | None = None
    start_date: datetime
    end_date: datetime | None = None
    max_members: int
    member_count: int


class CohortMemberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    cohort_id: int
    user_id: str
    role: str
    is_active: bool
    joined_at: datetime
