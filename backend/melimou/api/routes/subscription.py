"""Subscription routes — plan catalog, lifecycle, limits, checkout stub."""

from dataclasses import asdict

from fastapi import APIRouter, Depends, Response

from melimou.api.deps import get_auth_service, get_subscription_service, set_session_cookie
from melimou.core.auth import SessionUser, require_admin, require_auth
from melimou.metrics.cloudwatch import emit_business_event
from melimou.schemas.subscription import (
    ActivateRequest,
    CancelRequest,
    CheckoutRequest,
    CheckoutResponse,
    ExpireResponse,
    LimitsResponse,
    PlanResponse,
    SubscriptionChangeResponse,
    SubscriptionResponse,
)
from melimou.services.auth_service import AuthService
from melimou.services.subscription_service import SubscriptionService

router = APIRouter()


@router.get("/plans", response_model=list[PlanResponse])
async def list_plans(service: SubscriptionService = Depends(get_subscription_service)):
    """Public catalog, cheapest first."""
    return await service.list_plans()


@router.get("/current", response_model=SubscriptionResponse | None)
async def current_subscription(
    user: SessionUser = Depends(require_auth),
    service: SubscriptionService = Depends(get_subscription_service),
):
    return await service.get_current(user.user_id)


@router.get("/history", response_model=list[SubscriptionResponse])
async def subscription_history(
    user: SessionUser = Depends(require_auth),
    service: SubscriptionService = Depends(get_subscription_service),
):
    return await service.get_history(user.user_id)


@router.get("/limits", response_model=LimitsResponse)
async def subscription_limits(
    user: SessionUser = Depends(require_auth),
    service: SubscriptionService = Depends(get_subscription_service),
):
    tier, entitlements, subscription = await service.get_limits(user.user_id)
    return LimitsResponse(
        tier=tier.value,
        limits=asdict(entitlements),
        subscription=SubscriptionResponse.model_validate(subscription) if subscription else None,
    )


@router.post("/checkout", response_model=CheckoutResponse)
async def create_checkout(
    body: CheckoutRequest,
    user: SessionUser = Depends(require_auth),
    service: SubscriptionService = Depends(get_subscription_service),
):
    """Mock checkout; no payment provider is contacted."""
    return await service.create_checkout_session(user.user_id, body.plan_id, body.success_url, body.cancel_url)


@router.post("/activate", response_model=SubscriptionChangeResponse)
async def activate_subscription(
    body: ActivateRequest,
    response: Response,
    user: SessionUser = Depends(require_auth),
    service: SubscriptionService = Depends(get_subscription_service),
    auth: AuthService = Depends(get_auth_service),
):
    subscription = await service.activate(user.user_id, body.plan_id, body.stripe_subscription_id)
    await emit_business_event("new_subscription", user_id=user.user_id)
    _, token = await auth.reissue(user.user_id)
    set_session_cookie(response, token)
    return SubscriptionChangeResponse(
        subscription=SubscriptionResponse.model_validate(subscription),
        access_token=token,
    )


@router.post("/cancel", response_model=SubscriptionChangeResponse)
async def cancel_subscription(
    body: CancelRequest,
    response: Response,
    user: SessionUser = Depends(require_auth),
    service: SubscriptionService = Depends(get_subscription_service),
    auth: AuthService = Depends(get_auth_service),
):
    subscription = await service.cancel(user.user_id, body.subscription_id, body.cancel_at_period_end)
    await emit_business_event("subscription_cancelled", user_id=user.user_id)
    _, token = await auth.reissue(user.user_id)
    set_session_cookie(response, token)
    return SubscriptionChangeResponse(
        subscription=SubscriptionResponse.model_validate(subscription),
        access_token=token,
    )


@router.post("/expire-lapsed", response_model=ExpireResponse)
async def expire_lapsed(
    admin: SessionUser = Depends(require_admin),
    service: SubscriptionService = Depends(get_subscription_service),
):
    """Close period-end cancellations whose period is over (cron hook)."""
    return ExpireResponse(expired=await service.expire_lapsed())
