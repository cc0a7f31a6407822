"""Shared test fixtures: in-memory database, fake Redis, users, and tokens."""

import pytest
from fakeredis import FakeAsyncRedis
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from melimou.core.auth import issue_session_token
from melimou.db.base import Base, create_engine_for_url
from melimou.db.models.subscription_plan import SubscriptionPlan
from melimou.db.models.user import User

_TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def engine() -> AsyncEngine:
    """In-memory SQLite engine with every table created and plans seeded.

    Sets the global session factory so code calling get_session_factory()
    (routes, provisioning, seed) sees this database.
    """
    import melimou.db.base as db_mod
    import melimou.db.models  # noqa: F401

    engine = create_engine_for_url(_TEST_DB_URL)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    db_mod._engine = engine
    db_mod._session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    from melimou.db.seed import seed_subscription_plans

    await seed_subscription_plans()

    yield engine

    db_mod._engine = None
    db_mod._session_factory = None
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncSession:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def fake_redis():
    """FakeAsyncRedis installed as the shared client."""
    import melimou.db.redis as redis_mod

    client = FakeAsyncRedis(decode_responses=True)
    redis_mod._redis = client
    yield client
    redis_mod._redis = None
    await client.flushall()
    await client.aclose()


@pytest.fixture
def make_user(session_factory):
    """Factory inserting a User row; keyword arguments override the defaults."""
    counter = {"n": 0}

    async def _make(**overrides) -> User:
        counter["n"] += 1
        fields = {
            "email": f"learner{counter['n']}@example.com",
            "name": f"Learner {counter['n']}",
            "role": "student",
            "has_completed_onboarding": False,
            "subscription_tier": "free",
            "subscription_status": "active",
        }
        fields.update(overrides)
        async with session_factory() as session:
            user = User(**fields)
            session.add(user)
            await session.commit()
            return user

    return _make


@pytest.fixture
def plan_by_name(session_factory):
    async def _get(name: str) -> SubscriptionPlan:
        async with session_factory() as session:
            result = await session.execute(select(SubscriptionPlan).where(SubscriptionPlan.name == name))
            return result.scalar_one()

    return _get


@pytest.fixture
def auth_headers():
    """Bearer header carrying a fresh session token for a user row."""

    def _headers(user) -> dict[str, str]:
        return {"Authorization": f"Bearer {issue_session_token(user)}"}

    return _headers
