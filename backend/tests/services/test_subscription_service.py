"""Tests for the subscription lifecycle: activation, cancellation, one-active invariant."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select

from melimou.core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from melimou.core.locking import UserLock
from melimou.db.models.user import User
from melimou.db.models.user_subscription import UserSubscription
from melimou.domain.entitlements import Tier
from melimou.services.subscription_service import LOCK_SCOPE, SubscriptionService

pytestmark = pytest.mark.integration

NOW = datetime(2030, 1, 31, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def service(session_factory, fake_redis):
    return SubscriptionService(session_factory, lock=UserLock(fake_redis, LOCK_SCOPE), lock_timeout=2.0)


async def _active_rows(session_factory, user_id: str) -> list[UserSubscription]:
    async with session_factory() as session:
        result = await session.execute(
            select(UserSubscription).where(
                UserSubscription.user_id == user_id,
                UserSubscription.status == "active",
            )
        )
        return list(result.scalars().unique().all())


async def _user(session_factory, user_id: str) -> User:
    async with session_factory() as session:
        return await session.get(User, user_id)


async def test_list_plans_sorted_by_price(service):
    plans = await service.list_plans()
    assert [p.name for p in plans] == ["Free", "Pro", "Premium", "Pro Annual", "Premium Annual"]


async def test_activate_sets_period_and_tier(service, session_factory, make_user, plan_by_name):
    user = await make_user()
    pro = await plan_by_name("Pro")

    sub = await service.activate(user.id, pro.id, now=NOW)

    assert sub.status == "active"
    assert sub.plan.name == "Pro"
    assert sub.stripe_subscription_id.startswith("mock_sub_")
    # Jan 31 + 1 month clamps to Feb 28
    assert sub.current_period_end == datetime(2030, 2, 28, 12, 0, tzinfo=timezone.utc)

    reloaded = await _user(session_factory, user.id)
    assert reloaded.subscription_tier == "pro"
    assert reloaded.subscription_status == "active"


async def test_annual_plan_grants_its_tier(service, session_factory, make_user, plan_by_name):
    user = await make_user()
    plan = await plan_by_name("Premium Annual")

    sub = await service.activate(user.id, plan.id, now=NOW)

    assert sub.current_period_end == datetime(2031, 1, 31, 12, 0, tzinfo=timezone.utc)
    assert (await _user(session_factory, user.id)).subscription_tier == "premium"


async def test_activate_unknown_plan_is_not_found(service, make_user):
    user = await make_user()
    with pytest.raises(NotFoundError):
        await service.activate(user.id, 9999)


async def test_sequential_activations_keep_one_active(service, session_factory, make_user, plan_by_name):
    user = await make_user()
    pro = await plan_by_name("Pro")
    premium = await plan_by_name("Premium")

    first = await service.activate(user.id, pro.id)
    second = await service.activate(user.id, premium.id)

    active = await _active_rows(session_factory, user.id)
    assert [s.id for s in active] == [second.id]
    history = await service.get_history(user.id)
    assert {s.id: s.status for s in history} == {first.id: "inactive", second.id: "active"}
    assert (await _user(session_factory, user.id)).subscription_tier == "premium"


async def test_concurrent_activations_keep_one_active(service, session_factory, make_user, plan_by_name):
    user = await make_user()
    pro = await plan_by_name("Pro")
    premium = await plan_by_name("Premium")

    results = await asyncio.gather(
        service.activate(user.id, pro.id),
        service.activate(user.id, premium.id),
        return_exceptions=True,
    )

    assert all(not isinstance(r, Exception) for r in results)
    active = await _active_rows(session_factory, user.id)
    assert len(active) == 1
    winner_tier = "pro" if active[0].plan_id == pro.id else "premium"
    assert (await _user(session_factory, user.id)).subscription_tier == winner_tier


async def test_activation_waiting_past_timeout_is_conflict(session_factory, fake_redis, make_user, plan_by_name):
    user = await make_user()
    pro = await plan_by_name("Pro")
    lock = UserLock(fake_redis, LOCK_SCOPE)
    service = SubscriptionService(session_factory, lock=lock, lock_timeout=0.1)

    assert await lock.acquire(user.id, "someone-else")
    with pytest.raises(ConflictError):
        await service.activate(user.id, pro.id)

    assert await _active_rows(session_factory, user.id) == []


async def test_storage_rejects_second_active_row(session_factory, make_user, plan_by_name):
    """The partial unique index holds even if the service is bypassed."""
    from sqlalchemy.exc import IntegrityError

    user = await make_user()
    pro = await plan_by_name("Pro")

    async with session_factory() as session:
        for _ in range(2):
            session.add(
                UserSubscription(
                    user_id=user.id,
                    plan_id=pro.id,
                    status="active",
                    current_period_start=NOW,
                    current_period_end=NOW + timedelta(days=30),
                )
            )
        with pytest.raises(IntegrityError):
            await session.commit()


async def test_cancel_at_period_end_keeps_tier(service, session_factory, make_user, plan_by_name):
    user = await make_user()
    sub = await service.activate(user.id, (await plan_by_name("Pro")).id)

    cancelled = await service.cancel(user.id, sub.id, cancel_at_period_end=True)

    assert cancelled.status == "active"
    assert cancelled.cancel_at_period_end is True
    reloaded = await _user(session_factory, user.id)
    assert reloaded.subscription_tier == "pro"
    assert reloaded.subscription_status == "active"


async def test_cancel_immediately_downgrades_to_free(service, session_factory, make_user, plan_by_name):
    user = await make_user()
    sub = await service.activate(user.id, (await plan_by_name("Premium")).id)

    cancelled = await service.cancel(user.id, sub.id, cancel_at_period_end=False)

    assert cancelled.status == "cancelled"
    reloaded = await _user(session_factory, user.id)
    assert reloaded.subscription_tier == "free"
    assert reloaded.subscription_status == "cancelled"
    assert await service.get_current(user.id) is None


async def test_cancel_someone_elses_subscription_is_unauthorized(service, make_user, plan_by_name):
    owner = await make_user()
    intruder = await make_user()
    sub = await service.activate(owner.id, (await plan_by_name("Pro")).id)

    with pytest.raises(UnauthorizedError):
        await service.cancel(intruder.id, sub.id, cancel_at_period_end=False)


async def test_cancel_missing_and_inactive_subscriptions(service, make_user, plan_by_name):
    user = await make_user()
    with pytest.raises(NotFoundError):
        await service.cancel(user.id, 12345)

    sub = await service.activate(user.id, (await plan_by_name("Pro")).id)
    await service.cancel(user.id, sub.id, cancel_at_period_end=False)
    with pytest.raises(ConflictError):
        await service.cancel(user.id, sub.id)


async def test_limits_follow_active_plan(service, make_user, plan_by_name):
    user = await make_user()
    tier, limits, sub = await service.get_limits(user.id)
    assert tier == Tier.FREE
    assert limits.max_sessions == 3
    assert sub is None

    await service.activate(user.id, (await plan_by_name("Pro")).id)
    tier, limits, sub = await service.get_limits(user.id)
    assert tier == Tier.PRO
    assert (limits.max_sessions, limits.max_resources) == (50, 100)
    assert sub.plan.name == "Pro"


async def test_expire_lapsed_closes_period_end_cancellations(service, session_factory, make_user, plan_by_name):
    user = await make_user()
    sub = await service.activate(user.id, (await plan_by_name("Pro")).id, now=NOW)
    await service.cancel(user.id, sub.id, cancel_at_period_end=True)

    assert await service.expire_lapsed(now=NOW + timedelta(days=10)) == 0
    assert await service.expire_lapsed(now=NOW + timedelta(days=40)) == 1

    assert await _active_rows(session_factory, user.id) == []
    assert (await _user(session_factory, user.id)).subscription_tier == "free"


async def test_checkout_stub_returns_mock_url(service, make_user, plan_by_name):
    user = await make_user()
    pro = await plan_by_name("Pro")

    result = await service.create_checkout_session(user.id, pro.id, "/ok", "/cancel", now=NOW)

    assert result["checkout_url"] == f"/checkout/mock?planId={pro.id}&userId={user.id}"
    assert result["session_id"] == f"mock_session_{int(NOW.timestamp() * 1000)}"

    with pytest.raises(NotFoundError):
        await service.create_checkout_session(user.id, 9999, "/ok", "/cancel")
