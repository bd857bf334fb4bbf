"""
Reschedule impact calculation.

Moving a floating task drags every floating task after it by the same number
of days, keeping their spacing. Anchored tasks never move with the tail; when
the moved tail would run into one, the preview reports a reschedule conflict
but still carries the full set of updates so the caller can apply it anyway.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional
from uuid import UUID

from living_plan.core.exceptions import ValidationError
from living_plan.models.enums import ImpactStatus
from living_plan.models.plan import AnchoredBarrier, ConflictInfo, ImpactReport, TaskDateUpdate
from living_plan.models.task import Task
from living_plan.services.conflict_evaluator import (
    DEFAULT_HOURS_PER_DAY,
    effective_end,
    intrusion_days,
    overlap_days,
    shift_to,
    task_window,
    update_window,
)
from living_plan.services.task_chain import TaskChain, partition

logger = logging.getLogger(__name__)


class RescheduleImpactCalculator:
    """Computes the date changes caused by moving one task to a new start date."""

    def __init__(self, hours_per_day: int = DEFAULT_HOURS_PER_DAY):
        self.hours_per_day = hours_per_day

    def min_valid_date(self, chain: TaskChain, task: Task, today: date) -> date:
        """
        Earliest start date the task may be moved to.

        Anchored tasks may move anywhere from today on. Floating tasks must
        also start after the latest-ending task that currently precedes them.
        """
        if task.is_anchored or task.start_date is None:
            return today

        predecessor_ends = [
            effective_end(t, self.hours_per_day) for t in chain.upstream_of(task)
        ]
        if not predecessor_ends:
            return today
        return max(today, max(predecessor_ends) + timedelta(days=1))

    def calculate(
        self,
        chain: TaskChain,
        task_id: UUID,
        new_start_date: date,
        today: date,
    ) -> ImpactReport:
        """
        Preview moving a task. Performs no mutation.

        Args:
            chain: Current chain of the task's goal
            task_id: Task to move
            new_start_date: Requested first day of the task
            today: Caller's current date

        Returns:
            ImpactReport with status success or reschedule_conflict

        Raises:
            NotFoundError: If the task is not an open task of the goal
            ValidationError: If new_start_date is before the minimum valid date
        """
        task = chain.require(task_id)
        min_valid = self.min_valid_date(chain, task, today)
        if new_start_date < min_valid:
            raise ValidationError(
                f"Task '{task.title}' cannot start before {min_valid.isoformat()}",
                details={"min_valid_date": min_valid.isoformat()},
            )

        target_update = shift_to(task, new_start_date, self.hours_per_day)

        if task.is_anchored or task.start_date is None:
            # Anchored (or unpositioned) tasks move alone
            shift = (new_start_date - task.start_date).days if task.start_date else None
            return ImpactReport(
                status=ImpactStatus.SUCCESS,
                updated_tasks=[target_update],
                time_shift_in_days=shift,
                chain_version=chain.fingerprint,
                message="Successfully calculated reschedule for 1 task",
            )

        shift = (new_start_date - task.start_date).days
        anchored, floating = partition(chain.downstream_of(task))

        moved = [task, *floating]
        updated_tasks = [target_update] + [
            shift_to(t, t.start_date + timedelta(days=shift), self.hours_per_day)
            for t in floating
        ]
        logger.debug(
            f"Rescheduling task {task.id} by {shift} days moves {len(updated_tasks)} tasks "
            f"past {len(anchored)} anchored tasks"
        )

        barriers = [
            AnchoredBarrier(
                task_id=t.id,
                title=t.title,
                start_date=t.start_date,
                end_date=t.end_date,
            )
            for t in anchored
        ]

        conflict = self._find_conflict(moved, updated_tasks, anchored)
        if conflict is not None:
            anchor, compression, overlap = conflict
            logger.debug(f"Reschedule conflict with anchored task {anchor.id}: {compression} days")
            if overlap:
                clash = f"a {overlap}-day overlap with anchored task \"{anchor.title}\""
            else:
                clash = f"tasks to move across anchored task \"{anchor.title}\""
            return ImpactReport(
                status=ImpactStatus.RESCHEDULE_CONFLICT,
                updated_tasks=updated_tasks,
                time_shift_in_days=shift,
                chain_version=chain.fingerprint,
                anchored_barriers=barriers,
                conflict_info=ConflictInfo(
                    anchored_task_id=anchor.id,
                    anchored_task_title=anchor.title,
                    compression_needed_in_days=compression,
                ),
                message=(
                    f"Rescheduling would cause {clash}; "
                    f"{compression} days of compression needed"
                ),
            )

        return ImpactReport(
            status=ImpactStatus.SUCCESS,
            updated_tasks=updated_tasks,
            time_shift_in_days=shift,
            chain_version=chain.fingerprint,
            anchored_barriers=barriers,
            message=f"Successfully calculated reschedule for {len(updated_tasks)} tasks",
        )

    def _find_conflict(
        self,
        moved: list[Task],
        updated_tasks: list[TaskDateUpdate],
        anchored: list[Task],
    ) -> Optional[tuple[Task, int, int]]:
        """
        First anchored task (in chain order) the moved tasks would overlap.

        Compression is the largest overlap any moved task has with the anchor
        after the move. A task that jumps clean across the anchor counts the
        days it travelled past the anchor's near edge.

        Returns:
            (anchor, compression_needed_in_days, overlap_days) or None
        """
        for anchor in anchored:
            anchor_window = task_window(anchor, self.hours_per_day)
            compression = 0
            overlap = 0
            for task, update in zip(moved, updated_tasks):
                new_window = update_window(update)
                shared = overlap_days(new_window, anchor_window)
                if shared:
                    needed = shared
                else:
                    before = task.start_date < anchor.start_date
                    needed = intrusion_days(new_window, anchor_window, before)
                compression = max(compression, needed)
                overlap = max(overlap, shared)
            if compression > 0:
                return anchor, compression, overlap
        return None
