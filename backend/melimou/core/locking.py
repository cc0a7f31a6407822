"""Per-user Redis locks that serialise subscription changes.

Locks are SET NX with a TTL; release only deletes a key still holding the
caller's owner token.
"""

import asyncio
import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import redis.asyncio as redis
import structlog

from melimou.core.exceptions import ConflictError

logger = structlog.get_logger(__name__)


class UserLock:
    """Manages per-user mutual exclusion using Redis."""

    LOCK_PREFIX = "melimou:lock:"
    DEFAULT_TTL = 30
    POLL_INTERVAL = 0.05

    def __init__(self, redis_client: redis.Redis, scope: str):
        self.redis = redis_client
        self.scope = scope

    def _lock_key(self, user_id: str) -> str:
        return f"{self.LOCK_PREFIX}{self.scope}:{user_id}"

    async def acquire(self, user_id: str, owner: str, ttl: int | None = None, timeout: float = 5.0) -> bool:
        """Poll until the lock is ours or the timeout elapses.

        Returns:
            True if acquired, False on timeout
        """
        key = self._lock_key(user_id)
        ttl = ttl or self.DEFAULT_TTL
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout

        while True:
            if await self.redis.set(key, owner, nx=True, ex=ttl):
                return True
            if loop.time() >= deadline:
                return False
            await asyncio.sleep(self.POLL_INTERVAL)

    async def release(self, user_id: str, owner: str) -> bool:
        """Release the lock if we still own it (it may have expired and moved on)."""
        key = self._lock_key(user_id)
        current = await self.redis.get(key)
        if current != owner:
            return False
        await self.redis.delete(key)
        return True

    async def is_locked(self, user_id: str) -> bool:
        return await self.redis.exists(self._lock_key(user_id)) > 0

    @asynccontextmanager
    async def hold(self, user_id: str, ttl: int | None = None, timeout: float = 5.0) -> AsyncGenerator[str, None]:
        """Hold the lock for the duration of the block.

        Raises:
            ConflictError: if the lock could not be acquired in time
        """
        owner = str(uuid.uuid4())
        if not await self.acquire(user_id, owner, ttl=ttl, timeout=timeout):
            logger.warning("user_lock_timeout", scope=self.scope, user_id=user_id)
            raise ConflictError("Another change for this account is in progress. Try again shortly.")
        try:
            yield owner
        finally:
            await self.release(user_id, owner)
