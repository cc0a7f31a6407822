"""Tests for tutor sessions: entitlement gate, single active session, message pairs."""

import random
from datetime import datetime, timezone

import pytest
from sqlalchemy import select

from melimou.core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from melimou.db.models.tutor_session import TutorMessage, TutorSession
from melimou.services.subscription_service import SubscriptionService
from melimou.services.tutor_service import TutorService
from melimou.tutor.runner_canned import CANNED_REPLIES, DEFAULT_FEEDBACK, CannedTutorRunner

pytestmark = pytest.mark.integration

NOW = datetime(2030, 4, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def subscriptions(session_factory):
    return SubscriptionService(session_factory)


@pytest.fixture
def service(session_factory, subscriptions):
    return TutorService(session_factory, CannedTutorRunner(random.Random(7)), subscriptions)


@pytest.fixture
async def pro_user(make_user, subscriptions, plan_by_name):
    user = await make_user()
    plan = await plan_by_name("Pro")
    await subscriptions.activate(user.id, plan.id, now=NOW)
    return user


async def test_free_tier_cannot_start_session(service, make_user):
    user = await make_user()
    with pytest.raises(UnauthorizedError):
        await service.create_session(user.id)


async def test_new_session_ends_previous_active_one(service, session_factory, pro_user):
    first = await service.create_session(pro_user.id, "formal", now=NOW)
    second = await service.create_session(pro_user.id, "informal", topic="food", now=NOW)

    async with session_factory() as session:
        rows = (
            await session.execute(select(TutorSession).where(TutorSession.user_id == pro_user.id))
        ).scalars().all()
    statuses = {row.id: row.status for row in rows}
    assert statuses == {first.id: "completed", second.id: "active"}

    active = await service.get_active_session(pro_user.id)
    assert active.id == second.id
    assert active.topic == "food"


async def test_send_message_stores_user_and_assistant_pair(service, session_factory, pro_user):
    tutor_session = await service.create_session(pro_user.id, "formal", now=NOW)

    user_message, reply = await service.send_message(pro_user.id, tutor_session.id, "Καλημέρα!")

    assert user_message.role == "user"
    assert user_message.content == "Καλημέρα!"
    assert reply.role == "assistant"
    assert reply.content in CANNED_REPLIES["formal"]
    assert reply.feedback == DEFAULT_FEEDBACK

    async with session_factory() as session:
        stored = await session.get(TutorSession, tutor_session.id)
        messages = (
            await session.execute(select(TutorMessage).where(TutorMessage.session_id == tutor_session.id))
        ).scalars().all()
    assert stored.messages_count == 1
    assert len(messages) == 2


async def test_active_session_includes_messages(service, pro_user):
    tutor_session = await service.create_session(pro_user.id, now=NOW)
    await service.send_message(pro_user.id, tutor_session.id, "Τι κάνεις;")

    active = await service.get_active_session(pro_user.id)
    assert [m.role for m in active.messages] == ["user", "assistant"]


async def test_other_users_session_is_not_found(service, pro_user, make_user):
    tutor_session = await service.create_session(pro_user.id, now=NOW)
    stranger = await make_user()

    with pytest.raises(NotFoundError):
        await service.send_message(stranger.id, tutor_session.id, "hello")
    with pytest.raises(NotFoundError):
        await service.end_session(stranger.id, tutor_session.id)


async def test_ended_session_rejects_messages(service, pro_user):
    tutor_session = await service.create_session(pro_user.id, now=NOW)
    ended = await service.end_session(pro_user.id, tutor_session.id, now=NOW)
    assert ended.status == "completed"

    with pytest.raises(ConflictError):
        await service.send_message(pro_user.id, tutor_session.id, "still there?")
    assert await service.get_active_session(pro_user.id) is None


async def test_history_is_newest_first_and_limited(service, pro_user):
    for hour in range(3):
        await service.create_session(pro_user.id, now=NOW.replace(hour=10 + hour))

    history = await service.get_history(pro_user.id, limit=2)
    assert [s.started_at.hour for s in history] == [12, 11]
