"""
Goal API endpoints.

Provides CRUD operations for goals and their milestones.
"""

from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from living_plan.api.deps import CurrentUser, GoalRepo, MilestoneRepo, TaskRepo
from living_plan.core.exceptions import NotFoundError
from living_plan.models.goal import Goal, GoalCreate, GoalUpdate
from living_plan.models.milestone import Milestone, MilestoneCreate, MilestoneUpdate
from living_plan.models.task import Task

router = APIRouter(prefix="/goals", tags=["goals"])


@router.post("", response_model=Goal, status_code=status.HTTP_201_CREATED)
async def create_goal(goal: GoalCreate, user: CurrentUser, repo: GoalRepo) -> Goal:
    """Create a new goal."""
    return await repo.create(user.id, goal)


@router.get("", response_model=list[Goal])
async def list_goals(
    user: CurrentUser,
    repo: GoalRepo,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> list[Goal]:
    """List the user's goals."""
    return await repo.list(user.id, limit=limit, offset=offset)


@router.get("/{goal_id}", response_model=Goal)
async def get_goal(goal_id: UUID, user: CurrentUser, repo: GoalRepo) -> Goal:
    """Get a goal by ID."""
    goal = await repo.get(user.id, goal_id)
    if not goal:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Goal {goal_id} not found",
        )
    return goal


@router.patch("/{goal_id}", response_model=Goal)
async def update_goal(goal_id: UUID, update: GoalUpdate, user: CurrentUser, repo: GoalRepo) -> Goal:
    """Update a goal."""
    try:
        return await repo.update(user.id, goal_id, update)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_goal(goal_id: UUID, user: CurrentUser, repo: GoalRepo):
    """Delete a goal with its milestones and tasks."""
    deleted = await repo.delete(user.id, goal_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Goal {goal_id} not found",
        )


@router.get("/{goal_id}/tasks", response_model=list[Task])
async def list_goal_tasks(
    goal_id: UUID,
    user: CurrentUser,
    repo: GoalRepo,
    task_repo: TaskRepo,
    include_completed: bool = Query(False, description="Include completed tasks"),
) -> list[Task]:
    """List a goal's tasks in chain order."""
    if not await repo.get(user.id, goal_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Goal {goal_id} not found",
        )
    return await task_repo.list_by_goal(user.id, goal_id, include_completed=include_completed)


# ===========================================
# Milestones
# ===========================================


@router.post(
    "/{goal_id}/milestones",
    response_model=Milestone,
    status_code=status.HTTP_201_CREATED,
)
async def create_milestone(
    goal_id: UUID,
    milestone: MilestoneCreate,
    user: CurrentUser,
    repo: MilestoneRepo,
) -> Milestone:
    """Create a milestone under a goal."""
    if milestone.goal_id != goal_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="goal_id in body does not match the URL",
        )
    try:
        return await repo.create(user.id, milestone)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.get("/{goal_id}/milestones", response_model=list[Milestone])
async def list_milestones(goal_id: UUID, user: CurrentUser, repo: MilestoneRepo) -> list[Milestone]:
    """List a goal's milestones."""
    return await repo.list_by_goal(user.id, goal_id)


@router.patch("/milestones/{milestone_id}", response_model=Milestone)
async def update_milestone(
    milestone_id: UUID,
    milestone: MilestoneUpdate,
    user: CurrentUser,
    repo: MilestoneRepo,
) -> Milestone:
    """Update a milestone."""
    try:
        return await repo.update(user.id, milestone_id, milestone)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.delete("/milestones/{milestone_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_milestone(milestone_id: UUID, user: CurrentUser, repo: MilestoneRepo):
    """Delete a milestone; its tasks stay in the goal."""
    deleted = await repo.delete(user.id, milestone_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Milestone {milestone_id} not found",
        )
