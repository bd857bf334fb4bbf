"""
Delete impact calculation.

Deleting a task frees a gap in the goal's chain. Floating tasks after it are
pulled forward to close the gap, but never through an anchored task: an
anchored commitment is a wall, and tasks behind it can only move up to the
day after it ends.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from uuid import UUID

from living_plan.models.enums import ImpactStatus
from living_plan.models.plan import AnchoredBarrier, ImpactReport, TaskDateUpdate
from living_plan.services.conflict_evaluator import (
    DEFAULT_HOURS_PER_DAY,
    available_days,
    is_past_today,
    shift_to,
    span_days,
)
from living_plan.services.task_chain import TaskChain, partition

logger = logging.getLogger(__name__)


class DeleteImpactCalculator:
    """Computes the downstream date changes caused by deleting one task."""

    def __init__(self, hours_per_day: int = DEFAULT_HOURS_PER_DAY):
        """
        Initialize calculator.

        Args:
            hours_per_day: Working hours per calendar day for duration_hours tasks
        """
        self.hours_per_day = hours_per_day

    def calculate(self, chain: TaskChain, task_id_to_delete: UUID, today: date) -> ImpactReport:
        """
        Preview the effect of deleting a task. Performs no mutation.

        Args:
            chain: Current chain of the task's goal
            task_id_to_delete: Task to remove
            today: Caller's current date

        Returns:
            ImpactReport with status success or dependency_conflict

        Raises:
            NotFoundError: If the task is not an open task of the goal
        """
        task = chain.require(task_id_to_delete)
        time_saved = span_days(task, self.hours_per_day)

        downstream = chain.downstream_of(task)
        anchored, floating = partition(downstream)
        logger.debug(
            f"Deleting task {task.id} saves {time_saved} days; "
            f"{len(downstream)} downstream, {len(anchored)} anchored barriers"
        )

        updated_tasks: list[TaskDateUpdate] = []
        blocked_task_ids: list[UUID] = []

        for current in floating:
            barrier = chain.nearest_preceding_anchor(current, anchored)
            if barrier is None:
                pull = time_saved
            else:
                space = available_days(barrier, current.start_date, self.hours_per_day)
                if space <= 0:
                    blocked_task_ids.append(current.id)
                    continue
                pull = min(space, time_saved)

            new_start = current.start_date - timedelta(days=pull)
            updated_tasks.append(shift_to(current, new_start, self.hours_per_day))

        titles = {t.id: t.title for t in floating}
        dependency_issues = [
            f"Task '{titles[update.task_id]}' would be scheduled in the past "
            f"({update.new_start_date.isoformat()})"
            for update in updated_tasks
            if is_past_today(update.new_start_date, today)
        ]

        if dependency_issues:
            status = ImpactStatus.DEPENDENCY_CONFLICT
            message = f"Deletion would cause scheduling conflicts: {', '.join(dependency_issues)}"
        else:
            status = ImpactStatus.SUCCESS
            message = (
                f"Successfully calculated deletion impact: {len(updated_tasks)} tasks "
                f"will be rescheduled, saving {time_saved} days"
            )

        return ImpactReport(
            status=status,
            task_id_to_delete=task.id,
            chain_version=chain.fingerprint,
            updated_tasks=updated_tasks,
            time_saved_in_days=time_saved,
            dependency_issues=dependency_issues,
            blocked_task_ids=blocked_task_ids,
            anchored_barriers=[
                AnchoredBarrier(
                    task_id=t.id,
                    title=t.title,
                    start_date=t.start_date,
                    end_date=t.end_date,
                )
                for t in anchored
            ],
            message=message,
        )
