"""Tutor Pydantic schemas — practice sessions and messages."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class TutorSessionCreate(BaseModel):
    topic: str | None = None
    formality_level: Literal["informal", "formal", "mixed"] = "mixed"


class TutorMessageCreate(BaseModel):
    content: str = Field(..., min_length=1)


class TutorMessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    session_id: int
    role: str
    content: str
    feedback: dict | None = None
    created_at: datetime


class TutorSessionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    topic: str | None = None
    formality_level: str
    status: str
    messages_count: int
    started_at: datetime
    ended_at: datetime | None = None


class TutorSessionDetail(TutorSessionResponse):
    messages: list[TutorMessageResponse] = []


class TutorExchangeResponse(BaseModel):
    user_message: TutorMessageResponse
    tutor_message: TutorMessageResponse
