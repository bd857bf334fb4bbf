"""
Living plan API endpoints.

Preview the impact of deleting or moving a task, then commit the approved
(or force-accepted) updates atomically.
"""

from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, Response, status

from living_plan.api.deps import CurrentUser, LivingPlan
from living_plan.core.config import get_settings
from living_plan.core.exceptions import (
    NotFoundError,
    PersistenceError,
    StalePreviewError,
    ValidationError,
)
from living_plan.models.enums import ImpactStatus
from living_plan.models.plan import (
    CommitRequest,
    CommitResult,
    DeleteImpactRequest,
    ImpactReport,
    RescheduleImpactRequest,
)
from living_plan.utils.datetime_utils import get_user_today

router = APIRouter(prefix="/goals/{goal_id}/plan", tags=["living_plan"])


def resolve_today(requested: Optional[date]) -> date:
    """Caller-supplied date, else today in the configured timezone."""
    if requested is not None:
        return requested
    return get_user_today(get_settings().DEFAULT_TIMEZONE)


@router.post("/delete-impact", response_model=ImpactReport)
async def calculate_delete_impact(
    goal_id: UUID,
    request: DeleteImpactRequest,
    user: CurrentUser,
    service: LivingPlan,
    response: Response,
) -> ImpactReport:
    """Preview which tasks move if a task is deleted."""
    try:
        report = await service.calculate_delete_impact(
            user.id,
            goal_id,
            request.task_id,
            resolve_today(request.today),
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message) from exc

    if report.status == ImpactStatus.ERROR:
        response.status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return report


@router.post("/reschedule-impact", response_model=ImpactReport)
async def calculate_reschedule_impact(
    goal_id: UUID,
    request: RescheduleImpactRequest,
    user: CurrentUser,
    service: LivingPlan,
    response: Response,
) -> ImpactReport:
    """Preview which tasks move if a task starts on a new date."""
    try:
        report = await service.calculate_reschedule_impact(
            user.id,
            goal_id,
            request.task_id,
            request.new_start_date,
            resolve_today(request.today),
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message) from exc
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": exc.message, **(exc.details or {})},
        ) from exc

    if report.status == ImpactStatus.ERROR:
        response.status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return report


@router.post("/commit", response_model=CommitResult)
async def commit_plan_update(
    goal_id: UUID,
    request: CommitRequest,
    user: CurrentUser,
    service: LivingPlan,
) -> CommitResult:
    """Apply a previewed plan change; all updates land or none do."""
    try:
        return await service.commit(
            user.id,
            goal_id,
            request.updated_tasks,
            request.chain_version,
            task_id_to_delete=request.task_id_to_delete,
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message) from exc
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=exc.message,
        ) from exc
    except StalePreviewError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": exc.message, **(exc.details or {})},
        ) from exc
    except PersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=exc.message,
        ) from exc
