"""
SQLite implementation of Milestone repository.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import and_, select, update

from living_plan.core.exceptions import NotFoundError
from living_plan.infrastructure.local.database import GoalORM, MilestoneORM, TaskORM, get_session_factory
from living_plan.interfaces.milestone_repository import IMilestoneRepository
from living_plan.models.enums import MilestoneStatus
from living_plan.models.milestone import Milestone, MilestoneCreate, MilestoneUpdate
from living_plan.utils.datetime_utils import now_utc_naive


class SqliteMilestoneRepository(IMilestoneRepository):
    """SQLite implementation of milestone repository."""

    def __init__(self, session_factory=None):
        """
        Initialize repository.

        Args:
            session_factory: Optional session factory (for testing)
        """
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: MilestoneORM) -> Milestone:
        """Convert ORM object to Pydantic model."""
        return Milestone(
            id=UUID(orm.id),
            user_id=orm.user_id,
            goal_id=UUID(orm.goal_id),
            title=orm.title,
            order_index=orm.order_index,
            status=MilestoneStatus(orm.status),
            total_tasks=orm.total_tasks or 0,
            completed_tasks=orm.completed_tasks or 0,
            created_at=orm.created_at,
            updated_at=orm.updated_at,
        )

    async def _get_orm(self, session, user_id: str, milestone_id: UUID) -> Optional[MilestoneORM]:
        result = await session.execute(
            select(MilestoneORM).where(
                and_(MilestoneORM.id == str(milestone_id), MilestoneORM.user_id == user_id)
            )
        )
        return result.scalar_one_or_none()

    async def create(self, user_id: str, milestone: MilestoneCreate) -> Milestone:
        """Create a new milestone."""
        async with self._session_factory() as session:
            goal = await session.execute(
                select(GoalORM.id).where(
                    and_(GoalORM.id == str(milestone.goal_id), GoalORM.user_id == user_id)
                )
            )
            if goal.scalar_one_or_none() is None:
                raise NotFoundError(f"Goal {milestone.goal_id} not found")

            orm = MilestoneORM(
                id=str(uuid4()),
                user_id=user_id,
                goal_id=str(milestone.goal_id),
                title=milestone.title,
                order_index=milestone.order_index,
            )
            session.add(orm)
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def get(self, user_id: str, milestone_id: UUID) -> Optional[Milestone]:
        """Get a milestone by ID."""
        async with self._session_factory() as session:
            orm = await self._get_orm(session, user_id, milestone_id)
            return self._orm_to_model(orm) if orm else None

    async def list_by_goal(self, user_id: str, goal_id: UUID) -> list[Milestone]:
        """List milestones for a goal."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(MilestoneORM)
                .where(
                    and_(MilestoneORM.goal_id == str(goal_id), MilestoneORM.user_id == user_id)
                )
                .order_by(MilestoneORM.order_index, MilestoneORM.created_at)
            )
            return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def update(self, user_id: str, milestone_id: UUID, update: MilestoneUpdate) -> Milestone:
        """Update a milestone."""
        async with self._session_factory() as session:
            orm = await self._get_orm(session, user_id, milestone_id)
            if not orm:
                raise NotFoundError(f"Milestone {milestone_id} not found")

            update_data = update.model_dump(exclude_unset=True)
            for field, value in update_data.items():
                if value is not None:
                    if hasattr(value, "value"):
                        value = value.value
                    setattr(orm, field, value)

            orm.updated_at = now_utc_naive()
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def delete(self, user_id: str, milestone_id: UUID) -> bool:
        """Delete a milestone. Also nullifies milestone_id on related tasks."""
        async with self._session_factory() as session:
            orm = await self._get_orm(session, user_id, milestone_id)
            if not orm:
                return False

            # Nullify milestone_id on related tasks before deleting
            await session.execute(
                update(TaskORM)
                .where(TaskORM.milestone_id == str(milestone_id))
                .values(milestone_id=None)
            )

            await session.delete(orm)
            await session.commit()
            return True
