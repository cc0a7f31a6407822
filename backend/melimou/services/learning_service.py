"""LearningService — curriculum reads/writes and lesson progress."""

from datetime import datetime, timezone
from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from melimou.core.exceptions import NotFoundError, UnauthorizedError
from melimou.db.models.learning_path import LearningPath, Lesson, Module
from melimou.db.models.user_progress import UserProgress
from melimou.domain.entitlements import tier_allows

logger = structlog.get_logger(__name__)


def _with_curriculum():
    return selectinload(LearningPath.modules).selectinload(Module.lessons)


class LearningService:
    """Learning paths, modules, lessons, and per-user progress."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    # ── Paths ───────────────────────────────────────────────────────

    async def list_paths(self) -> list[LearningPath]:
        """Public paths, newest first, with modules and lessons loaded."""
        async with self.session_factory() as session:
            result = await session.execute(
                select(LearningPath)
                .where(LearningPath.is_public.is_(True))
                .options(_with_curriculum())
                .order_by(LearningPath.created_at.desc(), LearningPath.id.desc())
            )
            return list(result.scalars().all())

    async def get_path(self, path_id: int) -> LearningPath:
        async with self.session_factory() as session:
            result = await session.execute(
                select(LearningPath).where(LearningPath.id == path_id).options(_with_curriculum())
            )
            path = result.scalar_one_or_none()
        if path is None:
            raise NotFoundError("Learning path not found")
        return path

    async def create_path(self, **fields: Any) -> LearningPath:
        async with self.session_factory() as session:
            path = LearningPath(**fields)
            session.add(path)
            await session.commit()
        logger.info("learning_path_created", path_id=path.id)
        return await self.get_path(path.id)

    async def update_path(self, path_id: int, **fields: Any) -> LearningPath:
        async with self.session_factory() as session:
            path = await session.get(LearningPath, path_id)
            if path is None:
                raise NotFoundError("Learning path not found")
            for key, value in fields.items():
                setattr(path, key, value)
            await session.commit()
        return await self.get_path(path_id)

    async def delete_path(self, path_id: int) -> None:
        async with self.session_factory() as session:
            result = await session.execute(
                select(LearningPath).where(LearningPath.id == path_id).options(_with_curriculum())
            )
            path = result.scalar_one_or_none()
            if path is None:
                raise NotFoundError("Learning path not found")
            await session.delete(path)
            await session.commit()
        logger.info("learning_path_deleted", path_id=path_id)

    # ── Modules ─────────────────────────────────────────────────────

    async def create_module(self, path_id: int, **fields: Any) -> Module:
        async with self.session_factory() as session:
            if await session.get(LearningPath, path_id) is None:
                raise NotFoundError("Learning path not found")
            module = Module(learning_path_id=path_id, lessons=[], **fields)
            session.add(module)
            await session.commit()
            return module

    # ── Lessons ─────────────────────────────────────────────────────

    async def list_lessons(self, module_id: int) -> list[Lesson]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(Lesson).where(Lesson.module_id == module_id).order_by(Lesson.order_index, Lesson.id)
            )
            return list(result.scalars().all())

    async def get_lesson(self, lesson_id: int, user_tier: str | None = None) -> Lesson:
        """Lesson with its module and path.

        Raises:
            NotFoundError: If the lesson does not exist
            UnauthorizedError: If the lesson requires a higher tier than user_tier
        """
        async with self.session_factory() as session:
            result = await session.execute(
                select(Lesson)
                .where(Lesson.id == lesson_id)
                .options(selectinload(Lesson.module).selectinload(Module.learning_path))
            )
            lesson = result.scalar_one_or_none()

        if lesson is None:
            raise NotFoundError("Lesson not found")
        if not tier_allows(user_tier, lesson.required_subscription_tier):
            raise UnauthorizedError(f"Lesson requires the {lesson.required_subscription_tier} tier")
        return lesson

    async def create_lesson(self, module_id: int, **fields: Any) -> Lesson:
        async with self.session_factory() as session:
            if await session.get(Module, module_id) is None:
                raise NotFoundError("Module not found")
            lesson = Lesson(module_id=module_id, **fields)
            session.add(lesson)
            await session.commit()
            return lesson

    async def update_lesson(self, lesson_id: int, **fields: Any) -> Lesson:
        async with self.session_factory() as session:
            lesson = await session.get(Lesson, lesson_id)
            if lesson is None:
                raise NotFoundError("Lesson not found")
            for key, value in fields.items():
                setattr(lesson, key, value)
            await session.commit()
            return lesson

    # ── Progress ────────────────────────────────────────────────────

    async def mark_complete(
        self,
        user_id: str,
        lesson_id: int,
        score: int | None = None,
        time_spent: int | None = None,
        now: datetime | None = None,
    ) -> UserProgress:
        """Record completion on the single (user, lesson) progress row.

        Creates the row on first completion and updates it afterwards. A
        concurrent first insert that loses the unique race retries as an update.
        """
        now = now or datetime.now(timezone.utc)

        async with self.session_factory() as session:
            if await session.get(Lesson, lesson_id) is None:
                raise NotFoundError("Lesson not found")

            progress = await self._find_progress(session, user_id, lesson_id)
            if progress is None:
                progress = UserProgress(user_id=user_id, lesson_id=lesson_id)
                session.add(progress)

            _apply_completion(progress, score, time_spent, now)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                progress = await self._find_progress(session, user_id, lesson_id)
                _apply_completion(progress, score, time_spent, now)
                await session.commit()

        logger.info("lesson_completed", user_id=user_id, lesson_id=lesson_id, score=score)
        return progress

    async def get_progress(self, user_id: str, lesson_id: int) -> UserProgress | None:
        async with self.session_factory() as session:
            return await self._find_progress(session, user_id, lesson_id)

    @staticmethod
    async def _find_progress(session: AsyncSession, user_id: str, lesson_id: int) -> UserProgress | None:
        result = await session.execute(
            select(UserProgress).where(
                UserProgress.user_id == user_id,
                UserProgress.lesson_id == lesson_id,
            )
        )
        return result.scalar_one_or_none()


def _apply_completion(progress: UserProgress, score: int | None, time_spent: int | None, now: datetime) -> None:
    progress.status = "completed"
    progress.score = score
    progress.time_spent = time_spent
    progress.completed_at = now
