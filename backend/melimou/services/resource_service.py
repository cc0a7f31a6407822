"""ResourceService — study material library with uploader-only edits."""

from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from melimou.core.exceptions import NotFoundError, UnauthorizedError
from melimou.db.models.resource import Resource
from melimou.domain.entitlements import tier_allows

logger = structlog.get_logger(__name__)


class ResourceService:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def list_resources(
        self,
        search: str | None = None,
        difficulty: str | None = None,
        tag: str | None = None,
        limit: int = 20,
    ) -> list[Resource]:
        """Public resources, newest first.

        search matches the name case-insensitively. Tags live in a JSON column,
        so the tag filter is applied after the query and before the limit.
        """
        query = select(Resource).where(Resource.is_public.is_(True))
        if search:
            query = query.where(Resource.name.ilike(f"%{search}%"))
        if difficulty:
            query = query.where(Resource.difficulty == difficulty)
        query = query.order_by(Resource.created_at.desc(), Resource.id.desc())
        if not tag:
            query = query.limit(limit)

        async with self.session_factory() as session:
            result = await session.execute(query)
            resources = list(result.scalars().all())

        if tag:
            resources = [r for r in resources if tag in (r.tags or [])][:limit]
        return resources

    async def get(self, resource_id: int, user_tier: str | None = None) -> Resource:
        """Raises UnauthorizedError when the resource needs a higher tier than user_tier."""
        async with self.session_factory() as session:
            resource = await session.get(Resource, resource_id)
        if resource is None:
            raise NotFoundError("Resource not found")
        if not tier_allows(user_tier, resource.required_subscription_tier):
            raise UnauthorizedError(f"Resource requires the {resource.required_subscription_tier} tier")
        return resource

    async def create(self, uploaded_by: str, **fields: Any) -> Resource:
        async with self.session_factory() as session:
            resource = Resource(uploaded_by=uploaded_by, **fields)
            session.add(resource)
            await session.commit()

        logger.info("resource_created", resource_id=resource.id, uploaded_by=uploaded_by)
        return resource

    async def update(self, user_id: str, resource_id: int, **fields: Any) -> Resource:
        async with self.session_factory() as session:
            resource = await self._owned(session, user_id, resource_id, "update")
            for key, value in fields.items():
                setattr(resource, key, value)
            await session.commit()
            return resource

    async def delete(self, user_id: str, resource_id: int) -> None:
        async with self.session_factory() as session:
            resource = await self._owned(session, user_id, resource_id, "delete")
            await session.delete(resource)
            await session.commit()

        logger.info("resource_deleted", resource_id=resource_id, user_id=user_id)

    async def list_tags(self) -> list[str]:
        """Distinct tags across public resources, sorted."""
        async with self.session_factory() as session:
            result = await session.execute(select(Resource.tags).where(Resource.is_public.is_(True)))
            tags = set()
            for row_tags in result.scalars().all():
                tags.update(row_tags or [])
        return sorted(tags)

    @staticmethod
    async def _owned(session: AsyncSession, user_id: str, resource_id: int, action: str) -> Resource:
        resource = await session.get(Resource, resource_id)
        if resource is None:
            raise NotFoundError("Resource not found")
        if resource.uploaded_by != user_id:
            raise UnauthorizedError(f"Unauthorized to {action} this resource")
        return resource
