"""Subscription Pydantic schemas — plans, subscriptions, limits, checkout."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class PlanResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    price: int  # cents
    currency: str
    interval_type: str
    interval_count: int
    features: list[str] | None = None
    max_sessions: int | None = None  # -1 = unlimited
    max_resources: int | None = None


class SubscriptionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    plan_id: int
    status: str
    stripe_subscription_id: str | None = None
    current_period_start: datetime
    current_period_end: datetime
    cancel_at_period_end: bool
    created_at: datetime
    plan: PlanResponse | None = None


class ActivateRequest(BaseModel):
    plan_id: int
    stripe_subscription_id: str | None = None


class CancelRequest(BaseModel):
    subscription_id: int
    cancel_at_period_end: bool = True


class SubscriptionChangeResponse(BaseModel):
    """A subscription write plus a token carrying the new tier claim."""

    subscription: SubscriptionResponse
    access_token: str


class CheckoutRequest(BaseModel):
    plan_id: int
    success_url: str
    cancel_url: str


class CheckoutResponse(BaseModel):
    checkout_url: str
    session_id: str


class EntitlementsResponse(BaseModel):
    max_sessions: int
    max_resources: int
    can_access_cohorts: bool
    can_access_premium_content: bool
    has_ai_tutor: bool
    support_level: str


class LimitsResponse(BaseModel):
    tier: str
    limits: EntitlementsResponse
    subscription: SubscriptionResponse | None = None


class ExpireResponse(BaseModel):
    expired: int
