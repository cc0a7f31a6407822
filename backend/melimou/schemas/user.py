"""User and onboarding Pydantic schemas."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from melimou.domain.onboarding import DEFAULT_STUDY_HOURS, MAX_STUDY_HOURS, MIN_STUDY_HOURS
from melimou.schemas.subscription import SubscriptionResponse


class OnboardingRequest(BaseModel):
    """Answers collected by the wizard.

    Enum membership and ranges are checked by the domain layer so the error
    lists every offending field in one 422.
    """

    role: str | None = None
    greek_level: str | None = None
    learning_goals: list[str] = Field(default_factory=list)
    study_time_per_week: int = DEFAULT_STUDY_HOURS
    previous_experience: str | None = None
    interests: list[str] = Field(default_factory=list)
    how_heard_about_us: str | None = None
    wants_practice_test: bool = False
    formality_preference: str = "mixed"


class OnboardingStepRequest(OnboardingRequest):
    """Current wizard position plus answers so far."""

    step: str = "welcome"
    direction: Literal["next", "previous"] = "next"


class OnboardingStepResponse(BaseModel):
    step: str
    progress: float
    can_advance: bool


class OnboardingStatusResponse(BaseModel):
    has_completed_onboarding: bool
    role: str
    subscription_tier: str


class OnboardingResponseItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    question_key: str
    response: Any
    created_at: datetime


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str | None = None
    image: str | None = None
    role: str
    has_completed_onboarding: bool
    greek_level: str | None = None
    learning_goals: list[str] | None = None
    study_time_per_week: int | None = None
    previous_experience: str | None = None
    interests: list[str] | None = None
    how_heard_about_us: str | None = None
    wants_practice_test: bool | None = None
    formality_preference: str | None = None
    subscription_tier: str
    subscription_status: str | None = None
    subscription_start_date: datetime | None = None
    subscription_end_date: datetime | None = None


class ProfileResponse(UserResponse):
    subscriptions: list[SubscriptionResponse] = []


class ProfileUpdateRequest(BaseModel):
    name: str | None = None
    greek_level: str | None = None
    learning_goals: list[str] | None = None
    study_time_per_week: int | None = Field(default=None, ge=MIN_STUDY_HOURS, le=MAX_STUDY_HOURS)
    interests: list[str] | None = None
    formality_preference: str | None = None


class OnboardingCompleteResponse(BaseModel):
    user: UserResponse
    access_token: str
