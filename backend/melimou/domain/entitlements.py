"""Subscription tiers and entitlement resolution.

Pure domain logic with no external dependencies.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

UNLIMITED = -1


class Tier(str, Enum):
    """Subscription level. Ordinal rank drives content gating."""

    FREE = "free"
    PRO = "pro"
    PREMIUM = "premium"

    @property
    def rank(self) -> int:
        return _TIER_RANK[self]


_TIER_RANK = {Tier.FREE: 0, Tier.PRO: 1, Tier.PREMIUM: 2}

# Plan catalog name -> tier. Names not listed fall back to FREE.
PLAN_NAME_TO_TIER: dict[str, Tier] = {
    "Free": Tier.FREE,
    "Pro": Tier.PRO,
    "Premium": Tier.PREMIUM,
    "Pro Annual": Tier.PRO,
    "Premium Annual": Tier.PREMIUM,
}


class PlanLimits(Protocol):
    """Anything carrying the plan's numeric caps (a SubscriptionPlan row, a schema)."""

    max_sessions: int | None
    max_resources: int | None


@dataclass(frozen=True)
class Entitlements:
    """Resolved usage limits and feature flags for a user."""

    max_sessions: int
    max_resources: int
    can_access_cohorts: bool
    can_access_premium_content: bool
    has_ai_tutor: bool
    support_level: str


FREE_ENTITLEMENTS = Entitlements(
    max_sessions=3,
    max_resources=10,
    can_access_cohorts=False,
    can_access_premium_content=False,
    has_ai_tutor=False,
    support_level="community",
)

PREMIUM_ENTITLEMENTS = Entitlements(
    max_sessions=UNLIMITED,
    max_resources=UNLIMITED,
    can_access_cohorts=True,
    can_access_premium_content=True,
    has_ai_tutor=True,
    support_level="priority",
)

PRO_DEFAULT_SESSIONS = 50
PRO_DEFAULT_RESOURCES = 100


def parse_tier(value: str | Tier | None) -> Tier:
    """Coerce a stored tier value; missing or unknown values are FREE."""
    if isinstance(value, Tier):
        return value
    try:
        return Tier(value)
    except ValueError:
        return Tier.FREE


def tier_for_plan_name(plan_name: str) -> Tier:
    return PLAN_NAME_TO_TIER.get(plan_name, Tier.FREE)


def resolve_entitlements(tier: str | Tier | None, plan: PlanLimits | None = None) -> Entitlements:
    """Compute effective limits from the user's tier and optional active plan.

    Pure function -- no side effects, no DB access. Only the PRO policy
    reads plan caps; a missing cap falls back to the PRO defaults.
    """
    resolved = parse_tier(tier)

    if resolved == Tier.PREMIUM:
        return PREMIUM_ENTITLEMENTS

    if resolved == Tier.PRO:
        max_sessions = plan.max_sessions if plan is not None else None
        max_resources = plan.max_resources if plan is not None else None
        return Entitlements(
            max_sessions=max_sessions if max_sessions is not None else PRO_DEFAULT_SESSIONS,
            max_resources=max_resources if max_resources is not None else PRO_DEFAULT_RESOURCES,
            can_access_cohorts=True,
            can_access_premium_content=False,
            has_ai_tutor=True,
            support_level="email",
        )

    return FREE_ENTITLEMENTS


def tier_allows(user_tier: str | Tier | None, required_tier: str | Tier | None) -> bool:
    """True when user_tier meets or exceeds the content's required tier."""
    return parse_tier(user_tier).rank >= parse_tier(required_tier).rank
