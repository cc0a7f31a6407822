"""Tests for chat, alerts, resources, and cohorts routes."""

from datetime import datetime, timezone

import pytest

from melimou.db.models.cohort import Cohort

pytestmark = pytest.mark.integration


# ==================== CHAT ====================


async def test_chat_post_list_and_delete(client, make_user, auth_headers):
    author = await make_user()
    other = await make_user()

    sent = await client.post("/api/chat/messages", json={"content": "Καλησπέρα"}, headers=auth_headers(author))
    assert sent.status_code == 201
    message_id = sent.json()["id"]

    listed = await client.get("/api/chat/messages")
    assert [m["content"] for m in listed.json()] == ["Καλησπέρα"]

    forbidden = await client.delete(f"/api/chat/messages/{message_id}", headers=auth_headers(other))
    assert forbidden.status_code == 403
    assert forbidden.json()["detail"] == "Unauthorized to delete this message"

    deleted = await client.delete(f"/api/chat/messages/{message_id}", headers=auth_headers(author))
    assert deleted.status_code == 204


async def test_chat_limit_is_bounded(client):
    assert (await client.get("/api/chat/messages?limit=500")).status_code == 422


# ==================== ALERTS ====================


async def test_alert_flow(client, make_user, auth_headers):
    admin = await make_user(role="admin")
    learner = await make_user()

    created = await client.post(
        "/api/alerts",
        json={"title": "Welcome", "message": "Καλώς ήρθες", "target_user_id": learner.id},
        headers=auth_headers(admin),
    )
    assert created.status_code == 201

    listed = await client.get("/api/alerts?unread_only=true", headers=auth_headers(learner))
    assert [a["title"] for a in listed.json()] == ["Welcome"]

    read_all = await client.post("/api/alerts/read-all", headers=auth_headers(learner))
    assert read_all.json() == {"updated": 1}


async def test_students_cannot_create_alerts(client, make_user, auth_headers):
    student = await make_user()
    response = await client.post(
        "/api/alerts",
        json={"title": "Hi", "message": "everyone"},
        headers=auth_headers(student),
    )
    assert response.status_code == 403


# ==================== RESOURCES ====================


async def test_resource_ownership(client, make_user, auth_headers):
    uploader = await make_user()
    other = await make_user()

    created = await client.post(
        "/api/resources",
        json={"name": "Alphabet Song", "type": "audio", "url": "https://cdn/song.mp3", "tags": ["alphabet"]},
        headers=auth_headers(uploader),
    )
    resource_id = created.json()["id"]

    patch = await client.patch(f"/api/resources/{resource_id}", json={"name": "Mine"}, headers=auth_headers(other))
    delete = await client.delete(f"/api/resources/{resource_id}", headers=auth_headers(other))
    assert patch.status_code == 403
    assert delete.status_code == 403

    tags = await client.get("/api/resources/tags")
    assert tags.json() == ["alphabet"]

    own = await client.delete(f"/api/resources/{resource_id}", headers=auth_headers(uploader))
    assert own.status_code == 204


# ==================== COHORTS ====================


async def test_cohort_join_needs_paid_plan(client, session_factory, make_user, auth_headers, plan_by_name):
    async with session_factory() as session:
        cohort = Cohort(name="Thessaloniki Mornings", start_date=datetime(2030, 9, 1, tzinfo=timezone.utc))
        session.add(cohort)
        await session.commit()

    learner = await make_user()
    headers = auth_headers(learner)

    denied = await client.post(f"/api/cohorts/{cohort.id}/join", headers=headers)
    assert denied.status_code == 403

    pro = await plan_by_name("Pro")
    await client.post("/api/subscription/activate", json={"plan_id": pro.id}, headers=headers)

    joined = await client.post(f"/api/cohorts/{cohort.id}/join", headers=headers)
    again = await client.post(f"/api/cohorts/{cohort.id}/join", headers=headers)
    assert joined.status_code == 201
    assert again.status_code == 409

    listed = (await client.get("/api/cohorts")).json()
    assert listed[0]["member_count"] == 1

    left = await client.post(f"/api/cohorts/{cohort.id}/leave", headers=headers)
    assert left.status_code == 204
