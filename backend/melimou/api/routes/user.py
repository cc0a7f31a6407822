"""User routes — onboarding wizard, onboarding status, analytics, profile."""

from fastapi import APIRouter, Depends, Response

from melimou.api.deps import get_onboarding_service, get_user_service, set_session_cookie
from melimou.core.auth import SessionUser, issue_session_token, require_auth
from melimou.core.exceptions import ValidationError
from melimou.domain.onboarding import OnboardingAnswers, OnboardingStep, OnboardingWizard
from melimou.metrics.cloudwatch import emit_business_event
from melimou.schemas.user import (
    OnboardingCompleteResponse,
    OnboardingRequest,
    OnboardingResponseItem,
    OnboardingStatusResponse,
    OnboardingStepRequest,
    OnboardingStepResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    UserResponse,
)
from melimou.services.onboarding_service import OnboardingService
from melimou.services.user_service import UserService

router = APIRouter()


def _answers(body: OnboardingRequest) -> OnboardingAnswers:
    return OnboardingAnswers(
        role=body.role,
        greek_level=body.greek_level,
        learning_goals=body.learning_goals,
        study_time_per_week=body.study_time_per_week,
        previous_experience=body.previous_experience,
        interests=body.interests,
        how_heard_about_us=body.how_heard_about_us,
        wants_practice_test=body.wants_practice_test,
        formality_preference=body.formality_preference,
    )


@router.post("/onboarding/step", response_model=OnboardingStepResponse)
async def move_onboarding_step(
    body: OnboardingStepRequest,
    user: SessionUser = Depends(require_auth),
):
    """Validate one wizard move; the wizard state itself lives on the client.

    Raises:
        ValidationError(422): unknown step, missing answer for a guarded step,
            or a move past either end of the wizard
    """
    try:
        step = OnboardingStep(body.step)
    except ValueError:
        raise ValidationError(f"Unknown onboarding step: {body.step}", fields=["step"]) from None

    wizard = OnboardingWizard(step, _answers(body))
    if body.direction == "next":
        wizard.next()
    else:
        wizard.previous()

    return OnboardingStepResponse(
        step=wizard.step.value,
        progress=wizard.progress,
        can_advance=wizard.can_advance(),
    )


@router.post("/onboarding/complete", response_model=OnboardingCompleteResponse)
async def complete_onboarding(
    body: OnboardingRequest,
    response: Response,
    user: SessionUser = Depends(require_auth),
    service: OnboardingService = Depends(get_onboarding_service),
):
    """Persist the answers and reissue the token with onboarding marked done."""
    updated = await service.complete_onboarding(user.user_id, _answers(body))
    await emit_business_event("onboarding_completed", user_id=user.user_id)
    token = issue_session_token(updated)
    set_session_cookie(response, token)
    return OnboardingCompleteResponse(user=UserResponse.model_validate(updated), access_token=token)


@router.get("/onboarding-status", response_model=OnboardingStatusResponse)
async def onboarding_status(
    user: SessionUser = Depends(require_auth),
    service: OnboardingService = Depends(get_onboarding_service),
):
    return await service.get_status(user.user_id)


@router.get("/analytics", response_model=list[OnboardingResponseItem])
async def user_analytics(
    user_id: str | None = None,
    user: SessionUser = Depends(require_auth),
    service: OnboardingService = Depends(get_onboarding_service),
):
    """Onboarding audit rows; admins may pass another user's id."""
    return await service.get_responses(user.user_id, user_id)


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    user: SessionUser = Depends(require_auth),
    service: UserService = Depends(get_user_service),
):
    return await service.get_profile(user.user_id)


@router.patch("/profile", response_model=ProfileResponse)
async def update_profile(
    body: ProfileUpdateRequest,
    user: SessionUser = Depends(require_auth),
    service: UserService = Depends(get_user_service),
):
    return await service.update_profile(user.user_id, body.model_dump(exclude_unset=True))
