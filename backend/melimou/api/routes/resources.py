"""Resource routes — study material library."""

from fastapi import APIRouter, Depends, Query

from melimou.api.deps import get_resource_service
from melimou.core.auth import SessionUser, optional_auth, require_auth
from melimou.schemas.community import ResourceCreate, ResourceResponse, ResourceUpdate
from melimou.services.resource_service import ResourceService

router = APIRouter()


@router.get("", response_model=list[ResourceResponse])
async def list_resources(
    search: str | None = None,
    difficulty: str | None = None,
    tag: str | None = None,
    limit: int = Query(20, ge=1, le=100),
    service: ResourceService = Depends(get_resource_service),
):
    return await service.list_resources(search, difficulty, tag, limit)


@router.get("/tags", response_model=list[str])
async def list_tags(service: ResourceService = Depends(get_resource_service)):
    return await service.list_tags()


@router.get("/{resource_id}", response_model=ResourceResponse)
async def get_resource(
    resource_id: int,
    user: SessionUser | None = Depends(optional_auth),
    service: ResourceService = Depends(get_resource_service),
):
    return await service.get(resource_id, user.subscription_tier if user else None)


@router.post("", response_model=ResourceResponse, status_code=201)
async def create_resource(
    body: ResourceCreate,
    user: SessionUser = Depends(require_auth),
    service: ResourceService = Depends(get_resource_service),
):
    return await service.create(user.user_id, **body.model_dump())


@router.patch("/{resource_id}", response_model=ResourceResponse)
async def update_resource(
    resource_id: int,
    body: ResourceUpdate,
    user: SessionUser = Depends(require_auth),
    service: ResourceService = Depends(get_resource_service),
):
    return await service.update(user.user_id, resource_id, **body.model_dump(exclude_unset=True))


@router.delete("/{resource_id}", status_code=204)
async def delete_resource(
    resource_id: int,
    user: SessionUser = Depends(require_auth),
    service: ResourceService = Depends(get_resource_service),
):
    await service.delete(user.user_id, resource_id)
