"""Tutor routes — AI tutor practice sessions."""

from fastapi import APIRouter, Depends, Query

from melimou.api.deps import get_tutor_service
from melimou.core.auth import SessionUser, require_auth
from melimou.schemas.tutor import (
    TutorExchangeResponse,
    TutorMessageCreate,
    TutorMessageResponse,
    TutorSessionCreate,
    TutorSessionDetail,
    TutorSessionResponse,
)
from melimou.services.tutor_service import TutorService

router = APIRouter()


@router.post("/sessions", response_model=TutorSessionResponse, status_code=201)
async def create_session(
    body: TutorSessionCreate,
    user: SessionUser = Depends(require_auth),
    service: TutorService = Depends(get_tutor_service),
):
    """Start a session; any other active session of the caller is ended."""
    return await service.create_session(user.user_id, body.formality_level, body.topic)


@router.get("/sessions/active", response_model=TutorSessionDetail | None)
async def active_session(
    user: SessionUser = Depends(require_auth),
    service: TutorService = Depends(get_tutor_service),
):
    return await service.get_active_session(user.user_id)


@router.get("/sessions", response_model=list[TutorSessionResponse])
async def session_history(
    limit: int = Query(10, ge=1, le=50),
    user: SessionUser = Depends(require_auth),
    service: TutorService = Depends(get_tutor_service),
):
    return await service.get_history(user.user_id, limit)


@router.post("/sessions/{session_id}/messages", response_model=TutorExchangeResponse)
async def send_message(
    session_id: int,
    body: TutorMessageCreate,
    user: SessionUser = Depends(require_auth),
    service: TutorService = Depends(get_tutor_service),
):
    user_message, tutor_message = await service.send_message(user.user_id, session_id, body.content)
    return TutorExchangeResponse(
        user_message=TutorMessageResponse.model_validate(user_message),
        tutor_message=TutorMessageResponse.model_validate(tutor_message),
    )


@router.post("/sessions/{session_id}/end", response_model=TutorSessionResponse)
async def end_session(
    session_id: int,
    user: SessionUser = Depends(require_auth),
    service: TutorService = Depends(get_tutor_service),
):
    return await service.end_session(user.user_id, session_id)
