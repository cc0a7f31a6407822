"""Tests for curriculum reads and lesson progress upserts."""

from datetime import datetime, timezone

import pytest
from sqlalchemy import func, select

from melimou.core.exceptions import NotFoundError, UnauthorizedError
from melimou.db.models.user_progress import UserProgress
from melimou.services.learning_service import LearningService

pytestmark = pytest.mark.integration


@pytest.fixture
def service(session_factory):
    return LearningService(session_factory)


@pytest.fixture
async def curriculum(service):
    path = await service.create_path(name="Greek Basics", difficulty="beginner")
    module = await service.create_module(path.id, name="Alphabet", order_index=1)
    second = await service.create_lesson(module.id, name="Vowels", order_index=2)
    first = await service.create_lesson(module.id, name="Letters", order_index=1)
    premium = await service.create_lesson(
        module.id, name="Diphthongs", order_index=3, required_subscription_tier="premium"
    )
    return {"path": path, "module": module, "lessons": [first, second, premium]}


async def test_path_loads_ordered_modules_and_lessons(service, curriculum):
    path = await service.get_path(curriculum["path"].id)
    assert [m.name for m in path.modules] == ["Alphabet"]
    assert [lesson.name for lesson in path.modules[0].lessons] == ["Letters", "Vowels", "Diphthongs"]


async def test_list_paths_only_public(service, curriculum):
    await service.create_path(name="Draft", difficulty="advanced", is_public=False)
    assert [p.name for p in await service.list_paths()] == ["Greek Basics"]


async def test_list_lessons_ordered_by_index(service, curriculum):
    lessons = await service.list_lessons(curriculum["module"].id)
    assert [lesson.order_index for lesson in lessons] == [1, 2, 3]


async def test_get_lesson_includes_module_and_path(service, curriculum):
    lesson = await service.get_lesson(curriculum["lessons"][0].id, "free")
    assert lesson.module.name == "Alphabet"
    assert lesson.module.learning_path.name == "Greek Basics"


async def test_premium_lesson_is_gated_by_tier(service, curriculum):
    premium_id = curriculum["lessons"][2].id
    with pytest.raises(UnauthorizedError):
        await service.get_lesson(premium_id, "pro")
    assert (await service.get_lesson(premium_id, "premium")).name == "Diphthongs"


async def test_missing_lesson_is_not_found(service):
    with pytest.raises(NotFoundError):
        await service.get_lesson(404)


async def test_mark_complete_upserts_single_row(service, session_factory, curriculum, make_user):
    user = await make_user()
    lesson_id = curriculum["lessons"][0].id
    when = datetime(2030, 5, 1, tzinfo=timezone.utc)

    first = await service.mark_complete(user.id, lesson_id, score=70, time_spent=10, now=when)
    second = await service.mark_complete(user.id, lesson_id, score=95, time_spent=12, now=when)

    assert first.id == second.id
    async with session_factory() as session:
        count = await session.scalar(
            select(func.count(UserProgress.id)).where(
                UserProgress.user_id == user.id,
                UserProgress.lesson_id == lesson_id,
            )
        )
    assert count == 1

    progress = await service.get_progress(user.id, lesson_id)
    assert progress.status == "completed"
    assert progress.score == 95
    assert progress.time_spent == 12


async def test_progress_is_per_user(service, curriculum, make_user):
    alice = await make_user()
    bob = await make_user()
    lesson_id = curriculum["lessons"][0].id

    await service.mark_complete(alice.id, lesson_id, score=80)

    assert await service.get_progress(bob.id, lesson_id) is None


async def test_mark_complete_unknown_lesson(service, make_user):
    user = await make_user()
    with pytest.raises(NotFoundError):
        await service.mark_complete(user.id, 999)


async def test_delete_path_removes_curriculum(service, curriculum):
    await service.delete_path(curriculum["path"].id)
    with pytest.raises(NotFoundError):
        await service.get_path(curriculum["path"].id)
    assert await service.list_lessons(curriculum["module"].id) == []
