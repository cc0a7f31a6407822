"""Learning path routes — curriculum browsing and authoring."""

from fastapi import APIRouter, Depends

from melimou.api.deps import get_learning_service
from melimou.core.auth import SessionUser, require_content_author
from melimou.schemas.learning import (
    LearningPathCreate,
    LearningPathResponse,
    LearningPathUpdate,
    ModuleCreate,
    ModuleResponse,
)
from melimou.services.learning_service import LearningService

router = APIRouter()


@router.get("", response_model=list[LearningPathResponse])
async def list_learning_paths(service: LearningService = Depends(get_learning_service)):
    return await service.list_paths()


@router.get("/{path_id}", response_model=LearningPathResponse)
async def get_learning_path(path_id: int, service: LearningService = Depends(get_learning_service)):
    return await service.get_path(path_id)


@router.post("", response_model=LearningPathResponse, status_code=201)
async def create_learning_path(
    body: LearningPathCreate,
    author: SessionUser = Depends(require_content_author),
    service: LearningService = Depends(get_learning_service),
):
    return await service.create_path(**body.model_dump())


@router.patch("/{path_id}", response_model=LearningPathResponse)
async def update_learning_path(
    path_id: int,
    body: LearningPathUpdate,
    author: SessionUser = Depends(require_content_author),
    service: LearningService = Depends(get_learning_service),
):
    return await service.update_path(path_id, **body.model_dump(exclude_unset=True))


@router.delete("/{path_id}", status_code=204)
async def delete_learning_path(
    path_id: int,
    author: SessionUser = Depends(require_content_author),
    service: LearningService = Depends(get_learning_service),
):
    await service.delete_path(path_id)


@router.post("/{path_id}/modules", response_model=ModuleResponse, status_code=201)
async def create_module(
    path_id: int,
    body: ModuleCreate,
    author: SessionUser = Depends(require_content_author),
    service: LearningService = Depends(get_learning_service),
):
    return await service.create_module(path_id, **body.model_dump())
