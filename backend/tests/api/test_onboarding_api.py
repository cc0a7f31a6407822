"""Tests for onboarding routes: wizard moves, completion, status, analytics."""

import pytest

from melimou.core.auth import decode_session_token

pytestmark = pytest.mark.integration

ANSWERS = {
    "role": "student",
    "greek_level": "beginner",
    "learning_goals": ["travel", "family"],
    "study_time_per_week": 4,
    "interests": ["food", "music"],
    "how_heard_about_us": "friend",
    "wants_practice_test": True,
    "formality_preference": "informal",
}


async def test_complete_marks_user_and_reissues_token(client, make_user, auth_headers):
    user = await make_user()

    response = await client.post("/api/user/onboarding/complete", json=ANSWERS, headers=auth_headers(user))

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["has_completed_onboarding"] is True
    assert body["user"]["greek_level"] == "beginner"
    assert decode_session_token(body["access_token"]).has_completed_onboarding is True

    analytics = await client.get("/api/user/analytics", headers=auth_headers(user))
    assert len(analytics.json()) == 9


async def test_missing_answers_is_422_and_writes_nothing(client, make_user, auth_headers):
    user = await make_user()
    headers = auth_headers(user)

    response = await client.post(
        "/api/user/onboarding/complete",
        json={"role": "student", "learning_goals": []},
        headers=headers,
    )

    assert response.status_code == 422
    assert "greek_level" in response.json()["detail"]

    status = await client.get("/api/user/onboarding-status", headers=headers)
    assert status.json()["has_completed_onboarding"] is False
    assert (await client.get("/api/user/analytics", headers=headers)).json() == []


async def test_admin_role_cannot_be_self_selected(client, make_user, auth_headers):
    user = await make_user()
    response = await client.post(
        "/api/user/onboarding/complete",
        json={**ANSWERS, "role": "admin"},
        headers=auth_headers(user),
    )
    assert response.status_code == 422


async def test_step_advances_with_answer(client, make_user, auth_headers):
    user = await make_user()

    response = await client.post(
        "/api/user/onboarding/step",
        json={"step": "role", "role": "student"},
        headers=auth_headers(user),
    )

    assert response.status_code == 200
    assert response.json()["step"] == "level"


async def test_step_guard_blocks_missing_answer(client, make_user, auth_headers):
    user = await make_user()
    headers = auth_headers(user)

    blocked = await client.post("/api/user/onboarding/step", json={"step": "goals"}, headers=headers)
    unknown = await client.post("/api/user/onboarding/step", json={"step": "nowhere"}, headers=headers)
    back = await client.post(
        "/api/user/onboarding/step",
        json={"step": "welcome", "direction": "previous"},
        headers=headers,
    )

    assert blocked.status_code == 422
    assert unknown.status_code == 422
    assert back.status_code == 422


async def test_analytics_for_other_user_needs_admin(client, make_user, auth_headers):
    student = await make_user()
    other = await make_user()
    admin = await make_user(role="admin")

    denied = await client.get(f"/api/user/analytics?user_id={other.id}", headers=auth_headers(student))
    allowed = await client.get(f"/api/user/analytics?user_id={other.id}", headers=auth_headers(admin))

    assert denied.status_code == 403
    assert allowed.status_code == 200


async def test_profile_update_validates_fields(client, make_user, auth_headers):
    user = await make_user()
    headers = auth_headers(user)

    ok = await client.patch("/api/user/profile", json={"name": "Eleni", "greek_level": "advanced"}, headers=headers)
    bad = await client.patch("/api/user/profile", json={"greek_level": "fluent-ish"}, headers=headers)

    assert ok.status_code == 200
    assert ok.json()["name"] == "Eleni"
    assert ok.json()["subscriptions"] == []
    assert bad.status_code == 422
