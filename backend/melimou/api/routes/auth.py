"""Auth routes — credentials sign-up/sign-in and session reissue."""

from fastapi import APIRouter, Depends, Response

from melimou.api.deps import get_auth_service, set_session_cookie
from melimou.core.auth import SessionUser, require_auth
from melimou.core.config import get_settings
from melimou.metrics.cloudwatch import emit_business_event
from melimou.schemas.auth import SessionResponse, SignInRequest, SignUpRequest
from melimou.services.auth_service import AuthService

router = APIRouter()


def _session_response(user, token: str) -> SessionResponse:
    return SessionResponse(
        access_token=token,
        user_id=user.id,
        email=user.email,
        role=user.role,
        has_completed_onboarding=bool(user.has_completed_onboarding),
        subscription_tier=user.subscription_tier,
    )


@router.post("/signup", response_model=SessionResponse, status_code=201)
async def signup(
    body: SignUpRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service),
):
    user, token = await service.signup(body.email, body.password, body.name)
    set_session_cookie(response, token)
    await emit_business_event("user_signed_up", user_id=user.id)
    return _session_response(user, token)


@router.post("/signin", response_model=SessionResponse)
async def signin(
    body: SignInRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service),
):
    user, token = await service.signin(body.email, body.password)
    set_session_cookie(response, token)
    return _session_response(user, token)


@router.post("/session", response_model=SessionResponse)
async def refresh_session(
    response: Response,
    user: SessionUser = Depends(require_auth),
    service: AuthService = Depends(get_auth_service),
):
    """Reissue the token so claims reflect the current database state."""
    db_user, token = await service.reissue(user.user_id)
    set_session_cookie(response, token)
    return _session_response(db_user, token)


@router.post("/signout", status_code=204)
async def signout(response: Response):
    response.delete_cookie(get_settings().session_cookie_name)
