"""Session tokens and FastAPI auth dependencies.

Credential and OAuth verification happen upstream (sign-in routes or the
frontend auth library); handlers only see the decoded SessionUser passed in
explicitly through Depends().
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

import jwt as pyjwt
from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from melimou.core.config import get_settings

ALGORITHM = "HS256"

_bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class SessionUser:
    """Authenticated user extracted from a session token."""

    user_id: str
    role: str = "student"
    has_completed_onboarding: bool = False
    subscription_tier: str = "free"
    email: str | None = None
    claims: dict = field(default_factory=dict)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def issue_session_token(user, now: datetime | None = None) -> str:
    """Sign a session token carrying the user's routing claims.

    Args:
        user: User row (or anything with the same attributes)
        now: Issue time (for deterministic testing)
    """
    settings = get_settings()
    now = now or datetime.now(timezone.utc)
    payload = {
        "sub": user.id,
        "email": user.email,
        "role": user.role,
        "has_completed_onboarding": bool(user.has_completed_onboarding),
        "subscription_tier": user.subscription_tier or "free",
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=settings.session_max_age_seconds)).timestamp()),
    }
    return pyjwt.encode(payload, settings.auth_secret, algorithm=ALGORITHM)


def decode_session_token(token: str) -> SessionUser:
    """Verify and decode a session token.

    Raises ``HTTPException(401)`` on any validation failure.
    """
    settings = get_settings()
    try:
        payload = pyjwt.decode(
            token,
            settings.auth_secret,
            algorithms=[ALGORITHM],
            options={"require": ["sub", "exp", "iat"]},
        )
    except pyjwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except pyjwt.MissingRequiredClaimError as exc:
        raise HTTPException(status_code=401, detail=f"Missing required claim: {exc}")
    except pyjwt.InvalidTokenError as exc:
        raise HTTPException(status_code=401, detail=f"Invalid token: {exc}")

    return SessionUser(
        user_id=payload["sub"],
        role=payload.get("role", "student"),
        has_completed_onboarding=bool(payload.get("has_completed_onboarding", False)),
        subscription_tier=payload.get("subscription_tier", "free"),
        email=payload.get("email"),
        claims=payload,
    )


def extract_token(request: Request, credentials: HTTPAuthorizationCredentials | None) -> str | None:
    """Bearer header wins; the session cookie is the fallback for page requests."""
    if credentials is not None:
        return credentials.credentials
    return request.cookies.get(get_settings().session_cookie_name)


async def optional_auth(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
) -> SessionUser | None:
    """FastAPI dependency for public procedures that personalise when signed in."""
    token = extract_token(request, credentials)
    if token is None:
        return None
    try:
        user = decode_session_token(token)
    except HTTPException:
        # Expired or tampered tokens read as anonymous, like the page gate
        return None
    request.state.user_id = user.user_id
    return user


async def require_auth(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
) -> SessionUser:
    """FastAPI dependency that extracts and validates the session token.

    Usage::

        @router.get("/protected")
        async def protected(user: SessionUser = Depends(require_auth)):
            ...
    """
    token = extract_token(request, credentials)
    if token is None:
        raise HTTPException(status_code=401, detail="Missing authorization header")

    user = decode_session_token(token)

    # Downstream error handlers and audit logging read this
    request.state.user_id = user.user_id

    return user


def require_roles(*roles: str):
    """Build a dependency that admits only the given roles.

    The role claim is read from the token; admins always pass.
    """

    async def _require(user: SessionUser = Depends(require_auth)) -> SessionUser:
        if user.is_admin or user.role in roles:
            return user
        raise HTTPException(status_code=403, detail=f"Requires role: {', '.join(roles)}")

    return _require


require_admin = require_roles("admin")
require_content_author = require_roles("instructor", "admin")
