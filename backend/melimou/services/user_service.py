"""UserService — profile reads and edits outside the onboarding flow."""

from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from melimou.core.exceptions import NotFoundError, ValidationError
from melimou.db.models.user import User
from melimou.db.models.user_subscription import UserSubscription
from melimou.domain.onboarding import FORMALITY_PREFERENCES, GREEK_LEVELS, MAX_STUDY_HOURS, MIN_STUDY_HOURS

logger = structlog.get_logger(__name__)

EDITABLE_FIELDS = (
    "name",
    "greek_level",
    "learning_goals",
    "study_time_per_week",
    "interests",
    "formality_preference",
)


class UserService:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def get_profile(self, user_id: str) -> User:
        """User with subscriptions (and their plans) loaded, newest first."""
        async with self.session_factory() as session:
            result = await session.execute(
                select(User)
                .where(User.id == user_id)
                .options(selectinload(User.subscriptions).joinedload(UserSubscription.plan))
            )
            user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def update_profile(self, user_id: str, changes: dict[str, Any]) -> User:
        """Apply a partial profile update. Keys outside EDITABLE_FIELDS are ignored.

        Raises:
            ValidationError: If a level, study time, or formality value is out of range
        """
        changes = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS}
        _validate_profile_changes(changes)

        async with self.session_factory() as session:
            user = await session.get(User, user_id)
            if user is None:
                raise NotFoundError("User not found")
            for key, value in changes.items():
                setattr(user, key, value)
            await session.commit()

        logger.info("profile_updated", user_id=user_id, fields=sorted(changes))
        return await self.get_profile(user_id)


def _validate_profile_changes(changes: dict[str, Any]) -> None:
    invalid = []
    if "greek_level" in changes and changes["greek_level"] not in GREEK_LEVELS:
        invalid.append("greek_level")
    if "study_time_per_week" in changes:
        hours = changes["study_time_per_week"]
        if hours is None or not MIN_STUDY_HOURS <= hours <= MAX_STUDY_HOURS:
            invalid.append("study_time_per_week")
    if "formality_preference" in changes and changes["formality_preference"] not in FORMALITY_PREFERENCES:
        invalid.append("formality_preference")
    if invalid:
        raise ValidationError(f"Invalid profile fields: {', '.join(invalid)}", fields=invalid)
