"""Auth Pydantic schemas — credentials sign-up/sign-in and session tokens."""

from pydantic import BaseModel, Field


class SignUpRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=8)
    name: str | None = None


class SignInRequest(BaseModel):
    email: str
    password: str


class SessionResponse(BaseModel):
    """Token plus the claims the frontend routes on."""

    access_token: str
    token_type: str = "bearer"
    user_id: str
    email: str
    role: str
    has_completed_onboarding: bool
    subscription_tier: str
