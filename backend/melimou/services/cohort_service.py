"""CohortService — listing, joining, and leaving learning cohorts."""

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from melimou.core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from melimou.db.models.cohort import Cohort, CohortMember
from melimou.services.subscription_service import SubscriptionService

logger = structlog.get_logger(__name__)


class CohortService:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        subscriptions: SubscriptionService,
    ):
        self.session_factory = session_factory
        self.subscriptions = subscriptions

    async def list_active(self) -> list[tuple[Cohort, int]]:
        """Active cohorts with their current member counts, soonest start first."""
        member_count = (
            select(func.count(CohortMember.id))
            .where(CohortMember.cohort_id == Cohort.id, CohortMember.is_active.is_(True))
            .scalar_subquery()
        )
        async with self.session_factory() as session:
            result = await session.execute(
                select(Cohort, member_count)
                .where(Cohort.is_active.is_(True))
                .order_by(Cohort.start_date, Cohort.id)
            )
            return [(cohort, count) for cohort, count in result.all()]

    async def join(self, user_id: str, cohort_id: int) -> CohortMember:
        """Add the user to a cohort.

        Raises:
            UnauthorizedError: If the user's plan does not include cohorts
            NotFoundError: If the cohort does not exist or is inactive
            ConflictError: If the user is already a member or the cohort is full
        """
        entitlements = await self.subscriptions.get_entitlements(user_id)
        if not entitlements.can_access_cohorts:
            raise UnauthorizedError("Cohorts require a Pro or Premium subscription")

        async with self.session_factory() as session:
            try:
                async with session.begin():
                    cohort = await session.get(Cohort, cohort_id)
                    if cohort is None or not cohort.is_active:
                        raise NotFoundError("Cohort not found")

                    existing = (
                        await session.execute(
                            select(CohortMember).where(
                                CohortMember.cohort_id == cohort_id,
                                CohortMember.user_id == user_id,
                            )
                        )
                    ).scalar_one_or_none()
                    if existing is not None and existing.is_active:
                        raise ConflictError("Already a member of this cohort")

                    count = await session.scalar(
                        select(func.count(CohortMember.id)).where(
                            CohortMember.cohort_id == cohort_id,
                            CohortMember.is_active.is_(True),
                        )
                    )
                    if count >= cohort.max_members:
                        raise ConflictError("Cohort is full")

                    if existing is not None:
                        # Rejoining after leaving
                        existing.is_active = True
                        member = existing
                    else:
                        member = CohortMember(cohort_id=cohort_id, user_id=user_id, role="member")
                        session.add(member)
            except IntegrityError as exc:
                raise ConflictError("Already a member of this cohort") from exc

        logger.info("cohort_joined", user_id=user_id, cohort_id=cohort_id)
        return member

    async def leave(self, user_id: str, cohort_id: int) -> None:
        async with self.session_factory() as session:
            async with session.begin():
                member = (
                    await session.execute(
                        select(CohortMember).where(
                            CohortMember.cohort_id == cohort_id,
                            CohortMember.user_id == user_id,
                            CohortMember.is_active.is_(True),
                        )
                    )
                ).scalar_one_or_none()
                if member is None:
                    raise NotFoundError("Not a member of this cohort")
                member.is_active = False

        logger.info("cohort_left", user_id=user_id, cohort_id=cohort_id)
