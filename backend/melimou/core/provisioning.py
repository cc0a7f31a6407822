"""User provisioning on first sign-in.

Idempotent: repeat calls for the same email return the existing row. A
concurrent insert that loses the unique-email race re-reads the winner.
"""

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from melimou.db.base import get_session_factory
from melimou.db.models.user import User

logger = structlog.get_logger(__name__)


async def provision_user_on_first_login(
    email: str,
    claims: dict,
    session: AsyncSession | None = None,
) -> User:
    """Create the User row for a new OAuth sign-in.

    New users start as students on the free tier with onboarding pending.

    Args:
        email: Verified email from the identity provider
        claims: Provider profile claims (name, image, ...)
        session: Optional AsyncSession for testing (if None, creates new session)

    Returns:
        User instance (either newly created or existing)
    """
    if session is not None:
        return await _do_provision(email, claims, session)

    factory = get_session_factory()
    async with factory() as session:
        return await _do_provision(email, claims, session)


async def _do_provision(email: str, claims: dict, session: AsyncSession) -> User:
    result = await session.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if user is not None:
        return user

    user = User(
        email=email,
        name=claims.get("name"),
        image=claims.get("image") or claims.get("picture"),
        role="student",
        has_completed_onboarding=False,
        subscription_tier="free",
        subscription_status="active",
    )
    session.add(user)
    try:
        await session.commit()
    except IntegrityError:
        # Concurrent first login already created the row
        await session.rollback()
        result = await session.execute(select(User).where(User.email == email))
        return result.scalar_one()

    logger.info("user_provisioned", user_id=user.id, provider=claims.get("provider"))
    return user
