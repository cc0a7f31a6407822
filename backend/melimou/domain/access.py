"""Page access decisions for navigation requests.

Pure function over the request path and the session claims; the middleware
in melimou.middleware.access_gate turns the decision into a response.
"""
from dataclasses import dataclass
from enum import Enum
from urllib.parse import quote


class AccessAction(str, Enum):
    ALLOW = "allow"
    REDIRECT = "redirect"


@dataclass(frozen=True)
class AccessDecision:
    action: AccessAction
    location: str | None = None
    reason: str = ""


AUTH_PAGES_PREFIX = "/auth/"


def evaluate_access(
    path: str,
    claims: dict | None,
    *,
    public_pages: list[str],
    signin_path: str = "/auth/signin",
    onboarding_path: str = "/onboarding",
    dashboard_path: str = "/dashboard",
) -> AccessDecision:
    """Decide whether a page request passes or redirects.

    Rules, first match wins:
        1. Auth pages always pass.
        2. Public pages pass in any auth state.
        3. Signed in, onboarding incomplete, not on onboarding -> onboarding.
        4. Signed in, onboarding complete, on onboarding -> dashboard.
        5. Signed in -> pass; otherwise -> sign-in with a callback URL.

    Args:
        path: Request path, no query string
        claims: Decoded session claims, or None when no valid token is present
        public_pages: Exact paths open to everyone
    """
    if path.startswith(AUTH_PAGES_PREFIX):
        return AccessDecision(AccessAction.ALLOW, reason="auth_page")

    if path in public_pages:
        return AccessDecision(AccessAction.ALLOW, reason="public_page")

    if claims is not None:
        onboarded = bool(claims.get("has_completed_onboarding"))
        if not onboarded and path != onboarding_path:
            return AccessDecision(AccessAction.REDIRECT, onboarding_path, "onboarding_required")
        if onboarded and path == onboarding_path:
            return AccessDecision(AccessAction.REDIRECT, dashboard_path, "onboarding_done")
        return AccessDecision(AccessAction.ALLOW, reason="authenticated")

    return AccessDecision(
        AccessAction.REDIRECT,
        f"{signin_path}?callbackUrl={quote(path, safe='')}",
        "unauthenticated",
    )
