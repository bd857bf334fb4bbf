"""
Goal and milestone task counters.

Counters are derived from the task rows and recomputed inside the same
session that changed those rows, so they never reflect a partial write.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from living_plan.infrastructure.local.database import GoalORM, MilestoneORM, TaskORM
from living_plan.models.enums import TaskStatus


async def recount_goal_tasks(session: AsyncSession, goal_id: UUID | str) -> None:
    """Recompute total/completed task counts for a goal and its milestones."""
    goal_key = str(goal_id)
    completed = func.sum(case((TaskORM.status == TaskStatus.COMPLETED.value, 1), else_=0))

    result = await session.execute(
        select(TaskORM.milestone_id, func.count(TaskORM.id), completed)
        .where(TaskORM.goal_id == goal_key)
        .group_by(TaskORM.milestone_id)
    )
    per_milestone = {row[0]: (row[1], row[2] or 0) for row in result.all()}

    goal = await session.get(GoalORM, goal_key)
    if goal is not None:
        goal.total_tasks = sum(total for total, _ in per_milestone.values())
        goal.completed_tasks = sum(done for _, done in per_milestone.values())

    milestones = await session.execute(
        select(MilestoneORM).where(MilestoneORM.goal_id == goal_key)
    )
    for milestone in milestones.scalars().all():
        total, done = per_milestone.get(milestone.id, (0, 0))
        milestone.total_tasks = total
        milestone.completed_tasks = done
