"""
SQLite implementation of Task repository.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import and_, select
from sqlalchemy.exc import SQLAlchemyError

from living_plan.core.exceptions import InfrastructureError, NotFoundError, ValidationError
from living_plan.infrastructure.local.counters import recount_goal_tasks
from living_plan.infrastructure.local.database import GoalORM, MilestoneORM, TaskORM, get_session_factory
from living_plan.interfaces.task_repository import ITaskRepository
from living_plan.models.enums import Priority, TaskStatus
from living_plan.models.task import Task, TaskCreate, TaskUpdate
from living_plan.utils.datetime_utils import now_utc_naive


def task_orm_to_model(orm: TaskORM) -> Task:
    """Convert ORM object to Pydantic model."""
    return Task(
        id=UUID(orm.id),
        user_id=orm.user_id,
        goal_id=UUID(orm.goal_id),
        milestone_id=UUID(orm.milestone_id) if orm.milestone_id else None,
        title=orm.title,
        description=orm.description,
        priority=Priority(orm.priority) if orm.priority else None,
        status=TaskStatus(orm.status),
        start_date=orm.start_date,
        end_date=orm.end_date,
        duration_hours=orm.duration_hours,
        is_anchored=bool(orm.is_anchored),
        created_at=orm.created_at,
        updated_at=orm.updated_at,
    )


class SqliteTaskRepository(ITaskRepository):
    """SQLite implementation of task repository."""

    def __init__(self, session_factory=None):
        """
        Initialize repository.

        Args:
            session_factory: Optional session factory (for testing)
        """
        self._session_factory = session_factory or get_session_factory()

    async def _get_orm(self, session, user_id: str, task_id: UUID) -> Optional[TaskORM]:
        result = await session.execute(
            select(TaskORM).where(
                and_(TaskORM.id == str(task_id), TaskORM.user_id == user_id)
            )
        )
        return result.scalar_one_or_none()

    async def _check_milestone(self, session, user_id: str, goal_id: str, milestone_id: UUID) -> None:
        result = await session.execute(
            select(MilestoneORM.id).where(
                and_(
                    MilestoneORM.id == str(milestone_id),
                    MilestoneORM.goal_id == goal_id,
                    MilestoneORM.user_id == user_id,
                )
            )
        )
        if result.scalar_one_or_none() is None:
            raise NotFoundError(f"Milestone {milestone_id} not found in goal {goal_id}")

    async def create(self, user_id: str, task: TaskCreate) -> Task:
        """Create a new task."""
        async with self._session_factory() as session:
            goal = await session.execute(
                select(GoalORM.id).where(
                    and_(GoalORM.id == str(task.goal_id), GoalORM.user_id == user_id)
                )
            )
            if goal.scalar_one_or_none() is None:
                raise NotFoundError(f"Goal {task.goal_id} not found")
            if task.milestone_id:
                await self._check_milestone(session, user_id, str(task.goal_id), task.milestone_id)

            orm = TaskORM(
                id=str(uuid4()),
                user_id=user_id,
                goal_id=str(task.goal_id),
                milestone_id=str(task.milestone_id) if task.milestone_id else None,
                title=task.title,
                description=task.description,
                priority=task.priority.value if task.priority else None,
                status=TaskStatus.PENDING.value,
                start_date=task.start_date,
                end_date=task.end_date,
                duration_hours=task.duration_hours,
                is_anchored=task.is_anchored,
            )
            session.add(orm)
            await session.flush()
            await recount_goal_tasks(session, task.goal_id)
            await session.commit()
            await session.refresh(orm)
            return task_orm_to_model(orm)

    async def get(self, user_id: str, task_id: UUID) -> Optional[Task]:
        """Get a task by ID."""
        async with self._session_factory() as session:
            orm = await self._get_orm(session, user_id, task_id)
            return task_orm_to_model(orm) if orm else None

    async def list_by_goal(
        self,
        user_id: str,
        goal_id: UUID,
        include_completed: bool = False,
    ) -> list[Task]:
        """List a goal's tasks ordered by start date."""
        async with self._session_factory() as session:
            query = select(TaskORM).where(
                and_(TaskORM.goal_id == str(goal_id), TaskORM.user_id == user_id)
            )
            if not include_completed:
                query = query.where(TaskORM.status != TaskStatus.COMPLETED.value)

            query = query.order_by(
                TaskORM.start_date.is_(None),
                TaskORM.start_date,
                TaskORM.created_at,
            )
            try:
                result = await session.execute(query)
            except SQLAlchemyError as exc:
                raise InfrastructureError(f"Failed to load tasks of goal {goal_id}") from exc
            return [task_orm_to_model(orm) for orm in result.scalars().all()]

    async def update(self, user_id: str, task_id: UUID, update: TaskUpdate) -> Task:
        """Update an existing task."""
        async with self._session_factory() as session:
            orm = await self._get_orm(session, user_id, task_id)
            if not orm:
                raise NotFoundError(f"Task {task_id} not found")

            update_data = update.model_dump(exclude_unset=True)
            start_date = update_data.get("start_date") or orm.start_date
            end_date = update_data.get("end_date") or orm.end_date
            if start_date and end_date and end_date < start_date:
                raise ValidationError("end_date must be on or after start_date")
            if update_data.get("milestone_id"):
                await self._check_milestone(session, user_id, orm.goal_id, update_data["milestone_id"])

            for field, value in update_data.items():
                if value is not None:
                    if field == "milestone_id":
                        value = str(value)
                    elif hasattr(value, "value"):  # Enum
                        value = value.value
                    setattr(orm, field, value)

            orm.updated_at = now_utc_naive()
            await session.flush()
            await recount_goal_tasks(session, orm.goal_id)
            await session.commit()
            await session.refresh(orm)
            return task_orm_to_model(orm)

    async def delete(self, user_id: str, task_id: UUID) -> bool:
        """Delete a task."""
        async with self._session_factory() as session:
            orm = await self._get_orm(session, user_id, task_id)
            if not orm:
                return False

            goal_id = orm.goal_id
            await session.delete(orm)
            await session.flush()
            await recount_goal_tasks(session, goal_id)
            await session.commit()
            return True
