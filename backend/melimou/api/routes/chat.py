"""Chat routes — community messages."""

from fastapi import APIRouter, Depends, Query

from melimou.api.deps import get_chat_service
from melimou.core.auth import SessionUser, require_auth
from melimou.schemas.community import MessageCreate, MessageResponse
from melimou.services.chat_service import ChatService

router = APIRouter()


@router.get("/messages", response_model=list[MessageResponse])
async def list_messages(
    cohort_id: int | None = None,
    limit: int = Query(50, ge=1, le=100),
    service: ChatService = Depends(get_chat_service),
):
    """Newest first; omit cohort_id for the global room."""
    return await service.list_messages(cohort_id, limit)


@router.post("/messages", response_model=MessageResponse, status_code=201)
async def send_message(
    body: MessageCreate,
    user: SessionUser = Depends(require_auth),
    service: ChatService = Depends(get_chat_service),
):
    return await service.send(user.user_id, body.content, body.cohort_id, body.message_type, body.parent_id)


@router.delete("/messages/{message_id}", status_code=204)
async def delete_message(
    message_id: int,
    user: SessionUser = Depends(require_auth),
    service: ChatService = Depends(get_chat_service),
):
    await service.delete(user.user_id, message_id)
