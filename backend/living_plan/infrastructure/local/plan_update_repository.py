"""
SQLite implementation of the atomic plan update.
"""

from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.exc import SQLAlchemyError

from living_plan.core.exceptions import NotFoundError, PersistenceError, StalePreviewError
from living_plan.infrastructure.local.counters import recount_goal_tasks
from living_plan.infrastructure.local.database import GoalORM, TaskORM, get_session_factory
from living_plan.infrastructure.local.task_repository import task_orm_to_model
from living_plan.interfaces.plan_update_repository import IPlanUpdateRepository
from living_plan.models.enums import TaskStatus
from living_plan.models.plan import CommitResult, TaskDateUpdate
from living_plan.services.task_chain import chain_fingerprint
from living_plan.utils.datetime_utils import now_utc_naive

logger = logging.getLogger(__name__)


class SqlitePlanUpdateRepository(IPlanUpdateRepository):
    """Applies a previewed plan change in a single SQLite transaction."""

    def __init__(self, session_factory=None):
        """
        Initialize repository.

        Args:
            session_factory: Optional session factory (for testing)
        """
        self._session_factory = session_factory or get_session_factory()

    def _apply_date_update(self, orm: TaskORM, update: TaskDateUpdate) -> None:
        orm.start_date = update.new_start_date
        orm.end_date = update.new_end_date
        orm.updated_at = now_utc_naive()

    async def _check_chain_version(self, session, user_id: str, goal_id: UUID, expected: str) -> None:
        result = await session.execute(
            select(TaskORM).where(
                and_(
                    TaskORM.goal_id == str(goal_id),
                    TaskORM.user_id == user_id,
                    TaskORM.status != TaskStatus.COMPLETED.value,
                )
            )
        )
        current = chain_fingerprint(task_orm_to_model(orm) for orm in result.scalars().all())
        if current != expected:
            logger.warning(f"Plan preview for goal {goal_id} is out of date")
            raise StalePreviewError(
                "The plan changed since this preview was calculated; recompute the preview",
                details={"expected_chain_version": expected, "current_chain_version": current},
            )

    async def apply_plan_update(
        self,
        user_id: str,
        goal_id: UUID,
        updates: list[TaskDateUpdate],
        chain_version: str,
        task_id_to_delete: Optional[UUID] = None,
    ) -> CommitResult:
        """Apply all updates and the optional deletion, or nothing."""
        target_ids = [str(update.task_id) for update in updates]
        if task_id_to_delete:
            target_ids.append(str(task_id_to_delete))

        async with self._session_factory() as session:
            try:
                goal = await session.execute(
                    select(GoalORM.id).where(
                        and_(GoalORM.id == str(goal_id), GoalORM.user_id == user_id)
                    )
                )
                if goal.scalar_one_or_none() is None:
                    raise NotFoundError(f"Goal {goal_id} not found")

                result = await session.execute(
                    select(TaskORM).where(
                        and_(TaskORM.id.in_(target_ids), TaskORM.user_id == user_id)
                    )
                )
                rows = {orm.id: orm for orm in result.scalars().all()}

                # Optimistic precondition: every target is still an open task of this goal
                stale = [
                    task_id for task_id in target_ids
                    if task_id not in rows
                    or rows[task_id].goal_id != str(goal_id)
                    or rows[task_id].status == TaskStatus.COMPLETED.value
                ]
                if stale:
                    logger.warning(f"Stale plan preview for goal {goal_id}: {stale}")
                    raise StalePreviewError(
                        "The plan changed since this preview was calculated; recompute the preview",
                        details={"stale_task_ids": stale},
                    )

                await self._check_chain_version(session, user_id, goal_id, chain_version)

                for update in updates:
                    self._apply_date_update(rows[str(update.task_id)], update)

                if task_id_to_delete:
                    await session.delete(rows[str(task_id_to_delete)])

                await session.flush()
                await recount_goal_tasks(session, goal_id)
                await session.commit()
            except SQLAlchemyError as exc:
                await session.rollback()
                logger.error(f"Plan update for goal {goal_id} rolled back: {exc}")
                raise PersistenceError(
                    f"Failed to apply plan update for goal {goal_id}",
                    details={"error": str(exc)},
                ) from exc
            except BaseException:
                # Includes cancellation by the commit timeout
                await session.rollback()
                raise

        logger.info(
            f"Applied plan update for goal {goal_id}: {len(updates)} updated, "
            f"deleted={task_id_to_delete}"
        )
        return CommitResult(
            goal_id=goal_id,
            updated_count=len(updates),
            deleted_task_id=task_id_to_delete,
        )
