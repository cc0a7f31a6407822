"""Tests for the per-user Redis lock that serialises subscription changes."""

import asyncio

import pytest
from fakeredis import FakeAsyncRedis

from melimou.core.exceptions import ConflictError
from melimou.core.locking import UserLock

pytestmark = pytest.mark.unit


@pytest.fixture
async def redis():
    """Provide fakeredis async client."""
    client = FakeAsyncRedis(decode_responses=True)
    yield client
    await client.aclose()


async def test_acquire_and_release(redis):
    lock = UserLock(redis, "subscription")

    assert await lock.acquire("u1", "owner-a") is True
    assert await lock.is_locked("u1") is True
    assert await lock.release("u1", "owner-a") is True
    assert await lock.is_locked("u1") is False


async def test_second_owner_times_out(redis):
    lock = UserLock(redis, "subscription")
    await lock.acquire("u1", "owner-a")

    assert await lock.acquire("u1", "owner-b", timeout=0.1) is False


async def test_locks_are_per_user_and_scope(redis):
    subscriptions = UserLock(redis, "subscription")
    other_scope = UserLock(redis, "profile")
    await subscriptions.acquire("u1", "owner-a")

    assert await subscriptions.acquire("u2", "owner-b", timeout=0.1) is True
    assert await other_scope.acquire("u1", "owner-c", timeout=0.1) is True


async def test_release_ignores_foreign_owner(redis):
    """A stale holder must not delete a lock that has moved on."""
    lock = UserLock(redis, "subscription")
    await lock.acquire("u1", "owner-a")

    assert await lock.release("u1", "owner-b") is False
    assert await lock.is_locked("u1") is True


async def test_lock_expires_after_ttl(redis):
    lock = UserLock(redis, "subscription")
    await lock.acquire("u1", "owner-a", ttl=1)

    assert await redis.ttl("melimou:lock:subscription:u1") <= 1


async def test_hold_serialises_blocks(redis):
    lock = UserLock(redis, "subscription")
    order = []

    async def critical(name):
        async with lock.hold("u1", timeout=2):
            order.append(f"{name}-in")
            await asyncio.sleep(0.05)
            order.append(f"{name}-out")

    await asyncio.gather(critical("a"), critical("b"))

    assert order in (["a-in", "a-out", "b-in", "b-out"], ["b-in", "b-out", "a-in", "a-out"])
    assert await lock.is_locked("u1") is False


async def test_hold_raises_conflict_on_timeout(redis):
    lock = UserLock(redis, "subscription")
    await lock.acquire("u1", "someone-else")

    with pytest.raises(ConflictError):
        async with lock.hold("u1", timeout=0.1):
            pass
