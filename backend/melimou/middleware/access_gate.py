"""Page access gate.

Runs on navigation requests (anything outside the API and docs) and turns
melimou.domain.access.evaluate_access decisions into redirects. API routes
are protected by their own dependencies instead.
"""

import structlog
from fastapi import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse

from melimou.core.auth import decode_session_token
from melimou.core.config import get_settings
from melimou.domain.access import AccessAction, evaluate_access

logger = structlog.get_logger(__name__)

UNGATED_PREFIXES = ("/api", "/docs", "/redoc")
UNGATED_PATHS = ("/openapi.json",)


def is_ungated(path: str) -> bool:
    """API and docs routes, matched on whole path segments only."""
    if path in UNGATED_PATHS:
        return True
    return any(path == prefix or path.startswith(prefix + "/") for prefix in UNGATED_PREFIXES)


def session_claims(request: Request) -> dict | None:
    """Decoded claims from the Bearer header or session cookie; None when absent or invalid."""
    settings = get_settings()
    token = None
    authorization = request.headers.get("authorization", "")
    if authorization.lower().startswith("bearer "):
        token = authorization[7:].strip()
    if not token:
        token = request.cookies.get(settings.session_cookie_name)
    if not token:
        return None

    try:
        return decode_session_token(token).claims
    except HTTPException:
        # Expired or tampered tokens count as signed out
        return None


class AccessGateMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if is_ungated(path):
            return await call_next(request)

        settings = get_settings()
        decision = evaluate_access(
            path,
            session_claims(request),
            public_pages=settings.public_pages,
            signin_path=settings.signin_path,
            onboarding_path=settings.onboarding_path,
            dashboard_path=settings.dashboard_path,
        )

        if decision.action == AccessAction.REDIRECT:
            logger.info("page_redirect", path=path, location=decision.location, reason=decision.reason)
            return RedirectResponse(decision.location, status_code=307)

        return await call_next(request)
