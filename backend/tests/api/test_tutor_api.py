"""Tests for AI tutor routes with a deterministic runner."""

import random

import pytest

from melimou.api.deps import get_tutor_runner
from melimou.tutor.runner import TutorReply
from melimou.tutor.runner_canned import CannedTutorRunner

pytestmark = pytest.mark.integration


class EchoRunner:
    """Runner that repeats the learner back, for exact assertions."""

    async def reply(self, content, formality_level, topic=None):
        return TutorReply(content=f"[{formality_level}] {content}", feedback={"grammar": "ok"})


@pytest.fixture
async def pro_headers(client, make_user, auth_headers, plan_by_name):
    user = await make_user(has_completed_onboarding=True)
    headers = auth_headers(user)
    pro = await plan_by_name("Pro")
    await client.post("/api/subscription/activate", json={"plan_id": pro.id}, headers=headers)
    return headers


async def test_free_user_is_403(client, make_user, auth_headers):
    user = await make_user()
    response = await client.post("/api/tutor/sessions", json={}, headers=auth_headers(user))
    assert response.status_code == 403


async def test_exchange_uses_injected_runner(app, client, pro_headers):
    app.dependency_overrides[get_tutor_runner] = lambda: EchoRunner()

    session = await client.post("/api/tutor/sessions", json={"formality_level": "formal"}, headers=pro_headers)
    assert session.status_code == 201
    session_id = session.json()["id"]

    exchange = await client.post(
        f"/api/tutor/sessions/{session_id}/messages",
        json={"content": "Πώς είστε;"},
        headers=pro_headers,
    )

    assert exchange.status_code == 200
    body = exchange.json()
    assert body["user_message"]["role"] == "user"
    assert body["tutor_message"]["content"] == "[formal] Πώς είστε;"
    assert body["tutor_message"]["feedback"] == {"grammar": "ok"}

    active = (await client.get("/api/tutor/sessions/active", headers=pro_headers)).json()
    assert active["messages_count"] == 1
    assert len(active["messages"]) == 2


async def test_canned_runner_is_default(app, client, pro_headers):
    app.dependency_overrides[get_tutor_runner] = lambda: CannedTutorRunner(random.Random(1))

    session = await client.post("/api/tutor/sessions", json={"formality_level": "informal"}, headers=pro_headers)
    exchange = await client.post(
        f"/api/tutor/sessions/{session.json()['id']}/messages",
        json={"content": "Γεια!"},
        headers=pro_headers,
    )

    assert exchange.json()["tutor_message"]["role"] == "assistant"


async def test_second_session_ends_first(client, pro_headers):
    first = (await client.post("/api/tutor/sessions", json={}, headers=pro_headers)).json()
    second = (await client.post("/api/tutor/sessions", json={}, headers=pro_headers)).json()

    history = (await client.get("/api/tutor/sessions", headers=pro_headers)).json()
    statuses = {s["id"]: s["status"] for s in history}
    assert statuses == {first["id"]: "completed", second["id"]: "active"}


async def test_ending_session_blocks_messages(client, pro_headers):
    session_id = (await client.post("/api/tutor/sessions", json={}, headers=pro_headers)).json()["id"]

    ended = await client.post(f"/api/tutor/sessions/{session_id}/end", headers=pro_headers)
    late = await client.post(
        f"/api/tutor/sessions/{session_id}/messages",
        json={"content": "Ακόμα εδώ;"},
        headers=pro_headers,
    )

    assert ended.json()["status"] == "completed"
    assert late.status_code == 409


async def test_other_users_session_is_404(client, pro_headers, make_user, auth_headers):
    session_id = (await client.post("/api/tutor/sessions", json={}, headers=pro_headers)).json()["id"]
    stranger = await make_user()

    response = await client.post(
        f"/api/tutor/sessions/{session_id}/messages",
        json={"content": "hi"},
        headers=auth_headers(stranger),
    )
    assert response.status_code == 404
