"""OnboardingService — completion of the onboarding wizard and its read models.

Responsibilities:
- Validate collected answers before any write
- Persist the profile update and the 9-row audit trail in one transaction
- Onboarding status and per-user analytics (admin may read other users)
"""

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from melimou.core.exceptions import NotFoundError, UnauthorizedError
from melimou.db.models.onboarding_response import OnboardingResponse
from melimou.db.models.user import User
from melimou.domain.onboarding import OnboardingAnswers

logger = structlog.get_logger(__name__)


class OnboardingService:
    """Service layer for the onboarding workflow."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def complete_onboarding(self, user_id: str, answers: OnboardingAnswers) -> User:
        """Apply the answers to the user and append one audit row per question.

        Both writes share a transaction: a failure part-way leaves neither the
        profile change nor any audit row behind. Repeat calls are not
        deduplicated and append another full set of rows.

        Args:
            user_id: Session user ID
            answers: Collected wizard answers

        Returns:
            Updated User

        Raises:
            ValidationError: If required answers are missing or malformed (nothing written)
            NotFoundError: If the user row does not exist
        """
        answers.validate()

        async with self.session_factory() as session:
            async with session.begin():
                user = await session.get(User, user_id)
                if user is None:
                    raise NotFoundError("User not found")

                for column, value in answers.profile_fields().items():
                    setattr(user, column, value)
                user.has_completed_onboarding = True

                for question_key, response in answers.audit_rows():
                    session.add(
                        OnboardingResponse(
                            user_id=user_id,
                            question_key=question_key,
                            response=response,
                        )
                    )

            await session.refresh(user)

        logger.info(
            "onboarding_completed",
            user_id=user_id,
            role=answers.role,
            greek_level=answers.greek_level,
            goals=len(answers.learning_goals),
        )
        return user

    async def get_status(self, user_id: str) -> dict:
        """Onboarding flag, role, and tier with defaults for unknown users."""
        async with self.session_factory() as session:
            user = await session.get(User, user_id)

        return {
            "has_completed_onboarding": bool(user.has_completed_onboarding) if user else False,
            "role": user.role if user else "student",
            "subscription_tier": user.subscription_tier if user else "free",
        }

    async def get_responses(
        self,
        requester_id: str,
        target_user_id: str | None = None,
    ) -> list[OnboardingResponse]:
        """Audit rows for the requester, or for another user when the requester is an admin.

        Raises:
            UnauthorizedError: If a non-admin asks for someone else's responses
        """
        target = target_user_id or requester_id

        async with self.session_factory() as session:
            if target != requester_id:
                requester = await session.get(User, requester_id)
                if requester is None or requester.role != "admin":
                    raise UnauthorizedError("Unauthorized to view user analytics")

            result = await session.execute(
                select(OnboardingResponse)
                .where(OnboardingResponse.user_id == target)
                .order_by(OnboardingResponse.id)
            )
            return list(result.scalars().all())
