"""Integration tests for user provisioning on first OAuth sign-in.

Tests idempotent provisioning: repeat sign-ins return the same row.
"""

import pytest
from sqlalchemy import func, select

from melimou.core.provisioning import provision_user_on_first_login
from melimou.db.models.user import User

pytestmark = pytest.mark.integration


async def test_first_login_creates_free_student(db_session):
    """A new email gets a student row on the free tier with onboarding pending."""
    user = await provision_user_on_first_login(
        "sofia@example.com",
        {"name": "Sofia", "picture": "https://img/sofia.png", "provider": "google"},
        session=db_session,
    )

    assert user.email == "sofia@example.com"
    assert user.name == "Sofia"
    assert user.image == "https://img/sofia.png"
    assert user.role == "student"
    assert user.subscription_tier == "free"
    assert user.has_completed_onboarding is False


async def test_provisioning_is_idempotent(db_session):
    """Second sign-in returns the existing row, no duplicate."""
    first = await provision_user_on_first_login("kostas@example.com", {"name": "Kostas"}, session=db_session)
    second = await provision_user_on_first_login("kostas@example.com", {"name": "Renamed"}, session=db_session)

    assert first.id == second.id
    assert second.name == "Kostas"

    count = await db_session.scalar(select(func.count(User.id)).where(User.email == "kostas@example.com"))
    assert count == 1


async def test_provisioning_uses_global_factory_without_session(engine):
    """Without an explicit session the configured session factory is used."""
    user = await provision_user_on_first_login("maria@example.com", {})
    assert user.id is not None
