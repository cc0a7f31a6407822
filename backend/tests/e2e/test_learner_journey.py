"""E2E: a new learner from sign-up through onboarding to a paid plan and back.

Drives only the HTTP surface. Each step reuses the token the previous
response handed back, the way the frontend does.
"""

import pytest

pytestmark = pytest.mark.integration


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


async def test_signup_onboard_subscribe_cancel(e2e_client):
    client = e2e_client

    # Sign up: free tier, onboarding pending
    signup = await client.post(
        "/api/auth/signup",
        json={"email": "journey@example.com", "password": "ellinika123", "name": "Dimitra"},
    )
    assert signup.status_code == 201
    token = signup.json()["access_token"]
    assert signup.json()["has_completed_onboarding"] is False

    limits = (await client.get("/api/subscription/limits", headers=_bearer(token))).json()
    assert limits["tier"] == "free"
    assert limits["limits"]["max_sessions"] == 3
    assert limits["limits"]["max_resources"] == 10
    assert limits["limits"]["has_ai_tutor"] is False

    # Every protected page bounces to onboarding until it is done
    gated = await client.get("/dashboard", headers=_bearer(token))
    assert gated.status_code == 307
    assert gated.headers["location"] == "/onboarding"

    completed = await client.post(
        "/api/user/onboarding/complete",
        json={"role": "student", "greek_level": "beginner", "learning_goals": ["travel"]},
        headers=_bearer(token),
    )
    assert completed.status_code == 200
    token = completed.json()["access_token"]

    analytics = (await client.get("/api/user/analytics", headers=_bearer(token))).json()
    assert len(analytics) == 9
    assert (await client.get("/dashboard", headers=_bearer(token))).status_code == 200
    assert (await client.get("/onboarding", headers=_bearer(token))).headers["location"] == "/dashboard"

    # Upgrade to Pro
    plans = (await client.get("/api/subscription/plans")).json()
    pro = next(p for p in plans if p["name"] == "Pro")
    assert pro["price"] == 1900

    activated = await client.post("/api/subscription/activate", json={"plan_id": pro["id"]}, headers=_bearer(token))
    assert activated.status_code == 200
    subscription_id = activated.json()["subscription"]["id"]
    token = activated.json()["access_token"]

    limits = (await client.get("/api/subscription/limits", headers=_bearer(token))).json()
    assert limits["tier"] == "pro"
    assert limits["limits"]["max_sessions"] == 50
    assert limits["limits"]["has_ai_tutor"] is True

    tutor = await client.post("/api/tutor/sessions", json={"formality_level": "informal"}, headers=_bearer(token))
    assert tutor.status_code == 201

    # Cancel at period end: still Pro until the period closes
    soft = await client.post(
        "/api/subscription/cancel",
        json={"subscription_id": subscription_id},
        headers=_bearer(token),
    )
    assert soft.json()["subscription"]["status"] == "active"
    assert soft.json()["subscription"]["cancel_at_period_end"] is True

    # Cancel immediately: back to free
    hard = await client.post(
        "/api/subscription/cancel",
        json={"subscription_id": subscription_id, "cancel_at_period_end": False},
        headers=_bearer(token),
    )
    assert hard.json()["subscription"]["status"] == "cancelled"
    token = hard.json()["access_token"]

    limits = (await client.get("/api/subscription/limits", headers=_bearer(token))).json()
    assert limits["tier"] == "free"
    assert limits["subscription"] is None
