"""
Unit tests for Goal and Milestone repositories.
"""

from datetime import date
from uuid import uuid4

import pytest

from living_plan.core.exceptions import NotFoundError
from living_plan.infrastructure.local.goal_repository import SqliteGoalRepository
from living_plan.infrastructure.local.milestone_repository import SqliteMilestoneRepository
from living_plan.infrastructure.local.task_repository import SqliteTaskRepository
from living_plan.models.enums import MilestoneStatus
from living_plan.models.goal import GoalCreate, GoalUpdate
from living_plan.models.milestone import MilestoneCreate, MilestoneUpdate
from living_plan.models.task import TaskCreate


@pytest.mark.asyncio
async def test_create_and_get_goal(session_factory, test_user_id):
    repo = SqliteGoalRepository(session_factory=session_factory)

    goal = await repo.create(
        test_user_id,
        GoalCreate(title="Run a marathon", target_date=date(2026, 10, 4)),
    )
    retrieved = await repo.get(test_user_id, goal.id)

    assert retrieved is not None
    assert retrieved.title == "Run a marathon"
    assert retrieved.target_date == date(2026, 10, 4)
    assert retrieved.total_tasks == 0
    assert await repo.get("someone-else", goal.id) is None


@pytest.mark.asyncio
async def test_list_and_update_goals(session_factory, test_user_id):
    repo = SqliteGoalRepository(session_factory=session_factory)
    for i in range(3):
        await repo.create(test_user_id, GoalCreate(title=f"Goal {i}"))
    await repo.create("someone-else", GoalCreate(title="Not mine"))

    goals = await repo.list(test_user_id)
    assert len(goals) == 3

    updated = await repo.update(test_user_id, goals[0].id, GoalUpdate(description="Weekly"))
    assert updated.description == "Weekly"
    assert updated.title == goals[0].title

    with pytest.raises(NotFoundError):
        await repo.update(test_user_id, uuid4(), GoalUpdate(title="Missing"))


@pytest.mark.asyncio
async def test_delete_goal_removes_tasks_and_milestones(session_factory, test_user_id):
    goal_repo = SqliteGoalRepository(session_factory=session_factory)
    milestone_repo = SqliteMilestoneRepository(session_factory=session_factory)
    task_repo = SqliteTaskRepository(session_factory=session_factory)
    goal = await goal_repo.create(test_user_id, GoalCreate(title="Temporary"))
    milestone = await milestone_repo.create(
        test_user_id, MilestoneCreate(goal_id=goal.id, title="M")
    )
    task = await task_repo.create(test_user_id, TaskCreate(goal_id=goal.id, title="T"))

    assert await goal_repo.delete(test_user_id, goal.id) is True

    assert await goal_repo.get(test_user_id, goal.id) is None
    assert await milestone_repo.get(test_user_id, milestone.id) is None
    assert await task_repo.get(test_user_id, task.id) is None
    assert await goal_repo.delete(test_user_id, goal.id) is False


@pytest.mark.asyncio
async def test_milestones_are_ordered_within_goal(session_factory, test_user_id):
    goal = await SqliteGoalRepository(session_factory=session_factory).create(
        test_user_id, GoalCreate(title="Goal")
    )
    repo = SqliteMilestoneRepository(session_factory=session_factory)
    second = await repo.create(
        test_user_id, MilestoneCreate(goal_id=goal.id, title="Second", order_index=1)
    )
    first = await repo.create(
        test_user_id, MilestoneCreate(goal_id=goal.id, title="First", order_index=0)
    )

    milestones = await repo.list_by_goal(test_user_id, goal.id)

    assert [m.id for m in milestones] == [first.id, second.id]


@pytest.mark.asyncio
async def test_create_milestone_requires_goal(session_factory, test_user_id):
    repo = SqliteMilestoneRepository(session_factory=session_factory)

    with pytest.raises(NotFoundError):
        await repo.create(test_user_id, MilestoneCreate(goal_id=uuid4(), title="Orphan"))


@pytest.mark.asyncio
async def test_update_milestone_status(session_factory, test_user_id):
    goal = await SqliteGoalRepository(session_factory=session_factory).create(
        test_user_id, GoalCreate(title="Goal")
    )
    repo = SqliteMilestoneRepository(session_factory=session_factory)
    milestone = await repo.create(test_user_id, MilestoneCreate(goal_id=goal.id, title="M"))

    updated = await repo.update(
        test_user_id, milestone.id, MilestoneUpdate(status=MilestoneStatus.COMPLETED)
    )

    assert updated.status == MilestoneStatus.COMPLETED


@pytest.mark.asyncio
async def test_delete_milestone_detaches_tasks(session_factory, test_user_id):
    goal = await SqliteGoalRepository(session_factory=session_factory).create(
        test_user_id, GoalCreate(title="Goal")
    )
    milestone_repo = SqliteMilestoneRepository(session_factory=session_factory)
    task_repo = SqliteTaskRepository(session_factory=session_factory)
    milestone = await milestone_repo.create(
        test_user_id, MilestoneCreate(goal_id=goal.id, title="M")
    )
    task = await task_repo.create(
        test_user_id, TaskCreate(goal_id=goal.id, milestone_id=milestone.id, title="T")
    )

    assert await milestone_repo.delete(test_user_id, milestone.id) is True

    detached = await task_repo.get(test_user_id, task.id)
    assert detached is not None
    assert detached.milestone_id is None
