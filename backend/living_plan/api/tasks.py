"""
Task API endpoints.

Manual task creation and direct single-task edits. Chain-wide date changes go
through the living plan endpoints instead.
"""

from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from living_plan.api.deps import CurrentUser, TaskRepo
from living_plan.core.exceptions import NotFoundError, ValidationError
from living_plan.models.task import Task, TaskCreate, TaskUpdate

router = APIRouter()


@router.post("", response_model=Task, status_code=status.HTTP_201_CREATED)
async def create_task(task: TaskCreate, user: CurrentUser, repo: TaskRepo) -> Task:
    """Create a task in a goal."""
    try:
        return await repo.create(user.id, task)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.get("/{task_id}", response_model=Task)
async def get_task(task_id: UUID, user: CurrentUser, repo: TaskRepo) -> Task:
    """Get a task by ID."""
    task = await repo.get(user.id, task_id)
    if not task:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Task {task_id} not found",
        )
    return task


@router.patch("/{task_id}", response_model=Task)
async def update_task(task_id: UUID, update: TaskUpdate, user: CurrentUser, repo: TaskRepo) -> Task:
    """Edit a single task without cascading to the rest of the chain."""
    try:
        return await repo.update(user.id, task_id, update)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: UUID, user: CurrentUser, repo: TaskRepo):
    """Delete a single task without adjusting the rest of the chain."""
    deleted = await repo.delete(user.id, task_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Task {task_id} not found",
        )
