"""
Living plan service.

Facade used by the API: loads a goal's chain, runs the delete or reschedule
calculator against an explicit "today", and hands approved updates to the
commit applier.
"""

from __future__ import annotations

from datetime import date
from typing import Optional
from uuid import UUID

from living_plan.core.exceptions import InfrastructureError, NotFoundError
from living_plan.core.logger import logger
from living_plan.interfaces.goal_repository import IGoalRepository
from living_plan.interfaces.task_repository import ITaskRepository
from living_plan.models.plan import CommitResult, ImpactReport, TaskDateUpdate
from living_plan.services.commit_applier import CommitApplier
from living_plan.services.conflict_evaluator import DEFAULT_HOURS_PER_DAY
from living_plan.services.delete_impact_service import DeleteImpactCalculator
from living_plan.services.reschedule_impact_service import RescheduleImpactCalculator
from living_plan.services.task_chain import TaskChain


class LivingPlanService:
    """Preview and commit changes to a goal's task chain."""

    def __init__(
        self,
        task_repo: ITaskRepository,
        goal_repo: IGoalRepository,
        commit_applier: CommitApplier,
        hours_per_day: int = DEFAULT_HOURS_PER_DAY,
    ):
        self._task_repo = task_repo
        self._goal_repo = goal_repo
        self._commit_applier = commit_applier
        self._delete_calculator = DeleteImpactCalculator(hours_per_day)
        self._reschedule_calculator = RescheduleImpactCalculator(hours_per_day)

    async def _load_chain(self, user_id: str, goal_id: UUID) -> TaskChain:
        goal = await self._goal_repo.get(user_id, goal_id)
        if goal is None:
            raise NotFoundError(f"Goal {goal_id} not found")
        tasks = await self._task_repo.list_chain(user_id, goal_id)
        return TaskChain(goal_id, tasks)

    async def calculate_delete_impact(
        self,
        user_id: str,
        goal_id: UUID,
        task_id_to_delete: UUID,
        today: date,
    ) -> ImpactReport:
        """
        Preview deleting a task from a goal.

        Raises:
            NotFoundError: If the goal or task does not exist
        """
        try:
            chain = await self._load_chain(user_id, goal_id)
        except InfrastructureError as exc:
            logger.error(f"Delete preview for goal {goal_id} failed: {exc.message}")
            return ImpactReport.error(exc.message)

        report = self._delete_calculator.calculate(chain, task_id_to_delete, today)
        logger.info(
            f"Delete preview goal={goal_id} task={task_id_to_delete}: {report.status.value}, "
            f"{len(report.updated_tasks)} updates, {report.time_saved_in_days} days saved"
        )
        return report

    async def calculate_reschedule_impact(
        self,
        user_id: str,
        goal_id: UUID,
        task_id: UUID,
        new_start_date: date,
        today: date,
    ) -> ImpactReport:
        """
        Preview moving a task to a new start date.

        Raises:
            NotFoundError: If the goal or task does not exist
            ValidationError: If new_start_date is before the minimum valid date
        """
        try:
            chain = await self._load_chain(user_id, goal_id)
        except InfrastructureError as exc:
            logger.error(f"Reschedule preview for goal {goal_id} failed: {exc.message}")
            return ImpactReport.error(exc.message)

        report = self._reschedule_calculator.calculate(chain, task_id, new_start_date, today)
        logger.info(
            f"Reschedule preview goal={goal_id} task={task_id} -> {new_start_date}: "
            f"{report.status.value}, {len(report.updated_tasks)} updates"
        )
        return report

    async def commit(
        self,
        user_id: str,
        goal_id: UUID,
        updated_tasks: list[TaskDateUpdate],
        chain_version: str,
        task_id_to_delete: Optional[UUID] = None,
    ) -> CommitResult:
        """Apply a previewed (or force-accepted) report atomically."""
        return await self._commit_applier.commit(
            user_id,
            goal_id,
            updated_tasks,
            chain_version,
            task_id_to_delete=task_id_to_delete,
        )
