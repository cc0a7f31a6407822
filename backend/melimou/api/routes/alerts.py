"""Alert routes — the caller's notifications."""

from fastapi import APIRouter, Depends, Query

from melimou.api.deps import get_alert_service
from melimou.core.auth import SessionUser, require_auth, require_content_author
from melimou.schemas.community import AlertCreate, AlertResponse, MarkAllReadResponse
from melimou.services.alert_service import AlertService

router = APIRouter()


@router.get("", response_model=list[AlertResponse])
async def list_alerts(
    limit: int = Query(20, ge=1, le=100),
    unread_only: bool = False,
    user: SessionUser = Depends(require_auth),
    service: AlertService = Depends(get_alert_service),
):
    return await service.list_for_user(user.user_id, limit, unread_only)


@router.post("/read-all", response_model=MarkAllReadResponse)
async def mark_all_read(
    user: SessionUser = Depends(require_auth),
    service: AlertService = Depends(get_alert_service),
):
    return MarkAllReadResponse(updated=await service.mark_all_read(user.user_id))


@router.post("/{alert_id}/read", response_model=AlertResponse)
async def mark_read(
    alert_id: int,
    user: SessionUser = Depends(require_auth),
    service: AlertService = Depends(get_alert_service),
):
    return await service.mark_read(user.user_id, alert_id)


@router.post("", response_model=AlertResponse, status_code=201)
async def create_alert(
    body: AlertCreate,
    author: SessionUser = Depends(require_content_author),
    service: AlertService = Depends(get_alert_service),
):
    return await service.create(author.user_id, **body.model_dump())
