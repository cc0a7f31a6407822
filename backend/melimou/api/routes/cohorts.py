"""Cohort routes — browse, join, leave."""

from fastapi import APIRouter, Depends

from melimou.api.deps import get_cohort_service
from melimou.core.auth import SessionUser, require_auth
from melimou.schemas.community import CohortMemberResponse, CohortResponse
from melimou.services.cohort_service import CohortService

router = APIRouter()


@router.get("", response_model=list[CohortResponse])
async def list_cohorts(service: CohortService = Depends(get_cohort_service)):
    return [
        CohortResponse(
            id=cohort.id,
            name=cohort.name,
            description=cohort.description,
            start_date=cohort.start_date,
            end_date=cohort.end_date,
            max_members=cohort.max_members,
            member_count=count,
        )
        for cohort, count in await service.list_active()
    ]


@router.post("/{cohort_id}/join", response_model=CohortMemberResponse, status_code=201)
async def join_cohort(
    cohort_id: int,
    user: SessionUser = Depends(require_auth),
    service: CohortService = Depends(get_cohort_service),
):
    return await service.join(user.user_id, cohort_id)


@router.post("/{cohort_id}/leave", status_code=204)
async def leave_cohort(
    cohort_id: int,
    user: SessionUser = Depends(require_auth),
    service: CohortService = Depends(get_cohort_service),
):
    await service.leave(user.user_id, cohort_id)
