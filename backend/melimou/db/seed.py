"""Idempotent seed data for subscription plans."""

from sqlalchemy import select

from melimou.db.base import get_session_factory
from melimou.db.models.subscription_plan import SubscriptionPlan

_PRO_FEATURES = [
    "50 AI tutor sessions per month",
    "Premium learning resources",
    "Live cohort classes access",
    "Personalized study plans",
    "Email support",
    "Pronunciation practice tools",
    "Grammar exercises with feedback",
    "Cultural context lessons",
]

_PREMIUM_FEATURES = [
    "Unlimited AI tutor sessions",
    "All premium content access",
    "1-on-1 instructor sessions (2 per month)",
    "Priority customer support",
    "Certification path access",
    "Advanced conversation practice",
    "Business Greek modules",
    "Ancient Greek introduction",
    "Custom learning paths",
    "Progress analytics dashboard",
]

SUBSCRIPTION_PLANS = [
    {
        "name": "Free",
        "description": "Perfect for getting started with Greek learning",
        "price": 0,
        "currency": "USD",
        "interval_type": "month",
        "interval_count": 1,
        "features": [
            "3 AI tutor sessions per month",
            "Basic learning resources access",
            "Community forum access",
            "Progress tracking",
            "Basic Greek alphabet course",
        ],
        "max_sessions": 3,
        "max_resources": 10,
    },
    {
        "name": "Pro",
        "description": "For serious learners who want comprehensive Greek education",
        "price": 1900,
        "currency": "USD",
        "interval_type": "month",
        "interval_count": 1,
        "features": _PRO_FEATURES,
        "max_sessions": 50,
        "max_resources": 100,
    },
    {
        "name": "Premium",
        "description": "Complete Greek mastery with unlimited access and personal guidance",
        "price": 3900,
        "currency": "USD",
        "interval_type": "month",
        "interval_count": 1,
        "features": _PREMIUM_FEATURES,
        "max_sessions": -1,
        "max_resources": -1,
    },
    {
        "name": "Pro Annual",
        "description": "Save 20% with annual Pro subscription",
        "price": 18240,
        "currency": "USD",
        "interval_type": "year",
        "interval_count": 1,
        "features": _PRO_FEATURES + ["2 months free compared to monthly"],
        "max_sessions": 50,
        "max_resources": 100,
    },
    {
        "name": "Premium Annual",
        "description": "Save 25% with annual Premium subscription",
        "price": 35100,
        "currency": "USD",
        "interval_type": "year",
        "interval_count": 1,
        "features": _PREMIUM_FEATURES + ["3 months free compared to monthly"],
        "max_sessions": -1,
        "max_resources": -1,
    },
]


async def seed_subscription_plans() -> None:
    """Insert default subscription plans if they don't already exist."""
    factory = get_session_factory()

    async with factory() as session:
        for plan_data in SUBSCRIPTION_PLANS:
            result = await session.execute(
                select(SubscriptionPlan).where(SubscriptionPlan.name == plan_data["name"])
            )
            existing = result.scalar_one_or_none()

            if existing is None:
                session.add(SubscriptionPlan(**plan_data, is_active=True))

        await session.commit()
