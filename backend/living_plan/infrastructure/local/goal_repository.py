"""
SQLite implementation of Goal repository.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import and_, delete, select

from living_plan.core.exceptions import NotFoundError
from living_plan.infrastructure.local.database import GoalORM, MilestoneORM, TaskORM, get_session_factory
from living_plan.interfaces.goal_repository import IGoalRepository
from living_plan.models.goal import Goal, GoalCreate, GoalUpdate
from living_plan.utils.datetime_utils import now_utc_naive


class SqliteGoalRepository(IGoalRepository):
    """SQLite implementation of goal repository."""

    def __init__(self, session_factory=None):
        """
        Initialize repository.

        Args:
            session_factory: Optional session factory (for testing)
        """
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: GoalORM) -> Goal:
        """Convert ORM object to Pydantic model."""
        return Goal(
            id=UUID(orm.id),
            user_id=orm.user_id,
            title=orm.title,
            description=orm.description,
            target_date=orm.target_date,
            total_tasks=orm.total_tasks or 0,
            completed_tasks=orm.completed_tasks or 0,
            created_at=orm.created_at,
            updated_at=orm.updated_at,
        )

    async def _get_orm(self, session, user_id: str, goal_id: UUID) -> Optional[GoalORM]:
        result = await session.execute(
            select(GoalORM).where(
                and_(GoalORM.id == str(goal_id), GoalORM.user_id == user_id)
            )
        )
        return result.scalar_one_or_none()

    async def create(self, user_id: str, goal: GoalCreate) -> Goal:
        """Create a new goal."""
        async with self._session_factory() as session:
            orm = GoalORM(
                id=str(uuid4()),
                user_id=user_id,
                title=goal.title,
                description=goal.description,
                target_date=goal.target_date,
            )
            session.add(orm)
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def get(self, user_id: str, goal_id: UUID) -> Optional[Goal]:
        """Get a goal by ID."""
        async with self._session_factory() as session:
            orm = await self._get_orm(session, user_id, goal_id)
            return self._orm_to_model(orm) if orm else None

    async def list(self, user_id: str, limit: int = 100, offset: int = 0) -> list[Goal]:
        """List goals, newest first."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(GoalORM)
                .where(GoalORM.user_id == user_id)
                .order_by(GoalORM.created_at.desc())
                .limit(limit)
                .offset(offset)
            )
            return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def update(self, user_id: str, goal_id: UUID, update: GoalUpdate) -> Goal:
        """Update a goal."""
        async with self._session_factory() as session:
            orm = await self._get_orm(session, user_id, goal_id)
            if not orm:
                raise NotFoundError(f"Goal {goal_id} not found")

            update_data = update.model_dump(exclude_unset=True)
            for field, value in update_data.items():
                if value is not None:
                    setattr(orm, field, value)

            orm.updated_at = now_utc_naive()
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def delete(self, user_id: str, goal_id: UUID) -> bool:
        """Delete a goal together with its milestones and tasks."""
        async with self._session_factory() as session:
            orm = await self._get_orm(session, user_id, goal_id)
            if not orm:
                return False

            await session.execute(delete(TaskORM).where(TaskORM.goal_id == str(goal_id)))
            await session.execute(delete(MilestoneORM).where(MilestoneORM.goal_id == str(goal_id)))
            await session.delete(orm)
            await session.commit()
            return True
