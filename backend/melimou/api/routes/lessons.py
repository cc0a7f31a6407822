"""Lesson routes — lesson content, authoring, and completion tracking."""

from fastapi import APIRouter, Depends

from melimou.api.deps import get_learning_service
from melimou.core.auth import SessionUser, optional_auth, require_auth, require_content_author
from melimou.schemas.learning import (
    CompleteLessonRequest,
    LessonCreate,
    LessonDetailResponse,
    LessonResponse,
    LessonSummary,
    LessonUpdate,
    ProgressResponse,
)
from melimou.services.learning_service import LearningService

router = APIRouter()


@router.get("/modules/{module_id}/lessons", response_model=list[LessonSummary])
async def list_lessons(module_id: int, service: LearningService = Depends(get_learning_service)):
    return await service.list_lessons(module_id)


@router.post("/modules/{module_id}/lessons", response_model=LessonResponse, status_code=201)
async def create_lesson(
    module_id: int,
    body: LessonCreate,
    author: SessionUser = Depends(require_content_author),
    service: LearningService = Depends(get_learning_service),
):
    return await service.create_lesson(module_id, **body.model_dump())


@router.get("/lessons/{lesson_id}", response_model=LessonDetailResponse)
async def get_lesson(
    lesson_id: int,
    user: SessionUser | None = Depends(optional_auth),
    service: LearningService = Depends(get_learning_service),
):
    """Lesson with module and path names.

    The tier claim gates content: a lesson above the caller's tier is a 403,
    and anonymous callers are treated as free.
    """
    lesson = await service.get_lesson(lesson_id, user.subscription_tier if user else None)
    return LessonDetailResponse(
        **LessonResponse.model_validate(lesson).model_dump(),
        module_name=lesson.module.name,
        learning_path_id=lesson.module.learning_path.id,
        learning_path_name=lesson.module.learning_path.name,
    )


@router.patch("/lessons/{lesson_id}", response_model=LessonResponse)
async def update_lesson(
    lesson_id: int,
    body: LessonUpdate,
    author: SessionUser = Depends(require_content_author),
    service: LearningService = Depends(get_learning_service),
):
    return await service.update_lesson(lesson_id, **body.model_dump(exclude_unset=True))


@router.post("/lessons/{lesson_id}/complete", response_model=ProgressResponse)
async def complete_lesson(
    lesson_id: int,
    body: CompleteLessonRequest,
    user: SessionUser = Depends(require_auth),
    service: LearningService = Depends(get_learning_service),
):
    return await service.mark_complete(user.user_id, lesson_id, body.score, body.time_spent)


@router.get("/lessons/{lesson_id}/progress", response_model=ProgressResponse | None)
async def lesson_progress(
    lesson_id: int,
    user: SessionUser = Depends(require_auth),
    service: LearningService = Depends(get_learning_service),
):
    return await service.get_progress(user.user_id, lesson_id)
