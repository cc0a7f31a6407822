"""ChatService — community messages in cohort rooms and the global room."""

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from melimou.core.exceptions import NotFoundError, UnauthorizedError
from melimou.db.models.message import Message

logger = structlog.get_logger(__name__)


class ChatService:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def list_messages(self, cohort_id: int | None = None, limit: int = 50) -> list[Message]:
        """Newest first. cohort_id=None reads the global room."""
        if cohort_id is None:
            condition = Message.cohort_id.is_(None)
        else:
            condition = Message.cohort_id == cohort_id

        async with self.session_factory() as session:
            result = await session.execute(
                select(Message)
                .where(condition)
                .order_by(Message.created_at.desc(), Message.id.desc())
                .limit(limit)
            )
            return list(result.scalars().all())

    async def send(
        self,
        user_id: str,
        content: str,
        cohort_id: int | None = None,
        message_type: str = "chat",
        parent_id: int | None = None,
    ) -> Message:
        async with self.session_factory() as session:
            message = Message(
                user_id=user_id,
                content=content,
                cohort_id=cohort_id,
                message_type=message_type,
                parent_id=parent_id,
            )
            session.add(message)
            await session.commit()

        logger.info("chat_message_sent", user_id=user_id, message_id=message.id, cohort_id=cohort_id)
        return message

    async def delete(self, user_id: str, message_id: int) -> None:
        """Delete a message written by user_id.

        Raises:
            NotFoundError: If the message does not exist
            UnauthorizedError: If the message belongs to someone else
        """
        async with self.session_factory() as session:
            message = await session.get(Message, message_id)
            if message is None:
                raise NotFoundError("Message not found")
            if message.user_id != user_id:
                raise UnauthorizedError("Unauthorized to delete this message")
            await session.delete(message)
            await session.commit()

        logger.info("chat_message_deleted", user_id=user_id, message_id=message_id)
