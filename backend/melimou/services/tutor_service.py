"""TutorService — AI tutor practice sessions.

Reply generation goes through a TutorRunner; this module owns persistence,
ownership checks, and the has_ai_tutor entitlement gate.
"""

import time
from datetime import datetime, timezone

import structlog
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from melimou.core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from melimou.db.models.tutor_session import TutorMessage, TutorSession
from melimou.metrics.cloudwatch import emit_tutor_latency
from melimou.services.subscription_service import SubscriptionService
from melimou.tutor.runner import TutorRunner

logger = structlog.get_logger(__name__)

ACTIVE = "active"
COMPLETED = "completed"


class TutorService:
    """Service layer for tutor sessions and messages."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        runner: TutorRunner,
        subscriptions: SubscriptionService,
    ):
        self.session_factory = session_factory
        self.runner = runner
        self.subscriptions = subscriptions

    async def create_session(
        self,
        user_id: str,
        formality_level: str = "mixed",
        topic: str | None = None,
        now: datetime | None = None,
    ) -> TutorSession:
        """Start a session and end every other active session of the user.

        Raises:
            UnauthorizedError: If the user's plan does not include the AI tutor
        """
        entitlements = await self.subscriptions.get_entitlements(user_id)
        if not entitlements.has_ai_tutor:
            raise UnauthorizedError("The AI tutor requires a Pro or Premium subscription")

        now = now or datetime.now(timezone.utc)
        async with self.session_factory() as session:
            async with session.begin():
                await session.execute(
                    update(TutorSession)
                    .where(TutorSession.user_id == user_id, TutorSession.status == ACTIVE)
                    .values(status=COMPLETED, ended_at=now)
                    .execution_options(synchronize_session=False)
                )
                tutor_session = TutorSession(
                    user_id=user_id,
                    topic=topic,
                    formality_level=formality_level,
                    status=ACTIVE,
                    messages_count=0,
                    started_at=now,
                )
                session.add(tutor_session)

        logger.info("tutor_session_started", user_id=user_id, session_id=tutor_session.id, formality=formality_level)
        return tutor_session

    async def get_active_session(self, user_id: str) -> TutorSession | None:
        """The user's active session with its messages, oldest first."""
        async with self.session_factory() as session:
            result = await session.execute(
                select(TutorSession)
                .where(TutorSession.user_id == user_id, TutorSession.status == ACTIVE)
                .options(selectinload(TutorSession.messages))
                .order_by(TutorSession.started_at.desc(), TutorSession.id.desc())
                .limit(1)
            )
            return result.scalars().first()

    async def send_message(
        self,
        user_id: str,
        session_id: int,
        content: str,
    ) -> tuple[TutorMessage, TutorMessage]:
        """Store the learner's message and the tutor's reply.

        Returns:
            (user_message, assistant_message)

        Raises:
            NotFoundError: If the session does not exist or belongs to someone else
            ConflictError: If the session has ended
        """
        async with self.session_factory() as session:
            tutor_session = await self._owned_session(session, user_id, session_id)
            if tutor_session.status != ACTIVE:
                raise ConflictError("Tutor session has ended")
            formality = tutor_session.formality_level
            topic = tutor_session.topic

        started = time.perf_counter()
        reply = await self.runner.reply(content, formality, topic)
        await emit_tutor_latency(formality, (time.perf_counter() - started) * 1000)

        async with self.session_factory() as session:
            async with session.begin():
                tutor_session = await self._owned_session(session, user_id, session_id)
                user_message = TutorMessage(session_id=session_id, role="user", content=content)
                assistant_message = TutorMessage(
                    session_id=session_id,
                    role="assistant",
                    content=reply.content,
                    feedback=reply.feedback,
                )
                session.add(user_message)
                session.add(assistant_message)
                tutor_session.messages_count = (tutor_session.messages_count or 0) + 1

        logger.info("tutor_message_sent", user_id=user_id, session_id=session_id)
        return user_message, assistant_message

    async def end_session(self, user_id: str, session_id: int, now: datetime | None = None) -> TutorSession:
        now = now or datetime.now(timezone.utc)
        async with self.session_factory() as session:
            async with session.begin():
                tutor_session = await self._owned_session(session, user_id, session_id)
                if tutor_session.status == ACTIVE:
                    tutor_session.status = COMPLETED
                    tutor_session.ended_at = now

        logger.info("tutor_session_ended", user_id=user_id, session_id=session_id)
        return tutor_session

    async def get_history(self, user_id: str, limit: int = 10) -> list[TutorSession]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(TutorSession)
                .where(TutorSession.user_id == user_id)
                .order_by(TutorSession.started_at.desc(), TutorSession.id.desc())
                .limit(limit)
            )
            return list(result.scalars().all())

    @staticmethod
    async def _owned_session(session: AsyncSession, user_id: str, session_id: int) -> TutorSession:
        tutor_session = await session.get(TutorSession, session_id)
        if tutor_session is None or tutor_session.user_id != user_id:
            raise NotFoundError("Session not found or unauthorized")
        return tutor_session
