"""AlertService — targeted and global notifications."""

from datetime import datetime, timezone

import structlog
from sqlalchemy import and_, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from melimou.core.exceptions import NotFoundError
from melimou.db.models.alert import Alert

logger = structlog.get_logger(__name__)


def _visible_to(user_id: str, now: datetime):
    """Alerts addressed to the user or to everyone, not yet expired."""
    return and_(
        or_(Alert.target_user_id == user_id, Alert.target_user_id.is_(None)),
        or_(Alert.expires_at.is_(None), Alert.expires_at > now),
    )


class AlertService:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def list_for_user(
        self,
        user_id: str,
        limit: int = 20,
        unread_only: bool = False,
        now: datetime | None = None,
    ) -> list[Alert]:
        now = now or datetime.now(timezone.utc)
        query = select(Alert).where(_visible_to(user_id, now))
        if unread_only:
            query = query.where(Alert.is_read.is_(False))

        async with self.session_factory() as session:
            result = await session.execute(
                query.order_by(Alert.created_at.desc(), Alert.id.desc()).limit(limit)
            )
            return list(result.scalars().all())

    async def mark_read(self, user_id: str, alert_id: int, now: datetime | None = None) -> Alert:
        """Raises NotFoundError when the alert is not visible to the user."""
        now = now or datetime.now(timezone.utc)
        async with self.session_factory() as session:
            result = await session.execute(
                select(Alert).where(Alert.id == alert_id, _visible_to(user_id, now))
            )
            alert = result.scalar_one_or_none()
            if alert is None:
                raise NotFoundError("Alert not found")
            alert.is_read = True
            await session.commit()
            return alert

    async def mark_all_read(self, user_id: str, now: datetime | None = None) -> int:
        now = now or datetime.now(timezone.utc)
        async with self.session_factory() as session:
            result = await session.execute(
                update(Alert)
                .where(_visible_to(user_id, now), Alert.is_read.is_(False))
                .values(is_read=True)
                .execution_options(synchronize_session=False)
            )
            await session.commit()
        return result.rowcount

    async def create(
        self,
        created_by: str,
        title: str,
        message: str,
        type: str = "info",
        target_user_id: str | None = None,
        expires_at: datetime | None = None,
    ) -> Alert:
        async with self.session_factory() as session:
            alert = Alert(
                title=title,
                message=message,
                type=type,
                target_user_id=target_user_id,
                created_by=created_by,
                expires_at=expires_at,
            )
            session.add(alert)
            await session.commit()

        logger.info("alert_created", alert_id=alert.id, created_by=created_by, target_user_id=target_user_id)
        return alert
