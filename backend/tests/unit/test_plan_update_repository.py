"""
Unit tests for the atomic plan update.
"""

from datetime import date
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from living_plan.core.exceptions import NotFoundError, PersistenceError, StalePreviewError
from living_plan.infrastructure.local.goal_repository import SqliteGoalRepository
from living_plan.infrastructure.local.plan_update_repository import SqlitePlanUpdateRepository
from living_plan.infrastructure.local.task_repository import SqliteTaskRepository
from living_plan.models.enums import TaskStatus
from living_plan.models.goal import GoalCreate
from living_plan.models.plan import TaskDateUpdate
from living_plan.models.task import TaskCreate, TaskUpdate
from living_plan.services.delete_impact_service import DeleteImpactCalculator
from living_plan.services.reschedule_impact_service import RescheduleImpactCalculator
from living_plan.services.task_chain import TaskChain

TODAY = date(2026, 3, 1)


class FailingPlanUpdateRepository(SqlitePlanUpdateRepository):
    """Fails while writing the second task, after the first one was already changed."""

    def __init__(self, session_factory):
        super().__init__(session_factory=session_factory)
        self.calls = 0

    def _apply_date_update(self, orm, update):
        self.calls += 1
        if self.calls == 2:
            raise OperationalError("UPDATE tasks", {}, Exception("database is locked"))
        super()._apply_date_update(orm, update)


async def load_chain(session_factory, user_id, goal_id) -> TaskChain:
    task_repo = SqliteTaskRepository(session_factory=session_factory)
    return TaskChain(goal_id, await task_repo.list_chain(user_id, goal_id))


@pytest.fixture
async def plan(session_factory, test_user_id):
    """A goal with three consecutive floating tasks."""
    goal = await SqliteGoalRepository(session_factory=session_factory).create(
        test_user_id, GoalCreate(title="Goal")
    )
    task_repo = SqliteTaskRepository(session_factory=session_factory)
    tasks = []
    for i, (start, end) in enumerate([(2, 4), (5, 7), (8, 10)]):
        tasks.append(
            await task_repo.create(
                test_user_id,
                TaskCreate(
                    goal_id=goal.id,
                    title=f"T{i + 1}",
                    start_date=date(2026, 3, start),
                    end_date=date(2026, 3, end),
                ),
            )
        )
    return goal, tasks


@pytest.mark.asyncio
async def test_apply_updates_and_delete(session_factory, test_user_id, plan):
    goal, (t1, t2, t3) = plan
    repo = SqlitePlanUpdateRepository(session_factory=session_factory)
    task_repo = SqliteTaskRepository(session_factory=session_factory)
    chain = await load_chain(session_factory, test_user_id, goal.id)

    result = await repo.apply_plan_update(
        test_user_id,
        goal.id,
        [
            TaskDateUpdate(task_id=t2.id, new_start_date=date(2026, 3, 2), new_end_date=date(2026, 3, 4)),
            TaskDateUpdate(task_id=t3.id, new_start_date=date(2026, 3, 5), new_end_date=date(2026, 3, 7)),
        ],
        chain.fingerprint,
        task_id_to_delete=t1.id,
    )

    assert result.status == "success"
    assert result.updated_count == 2
    assert result.deleted_task_id == t1.id
    assert await task_repo.get(test_user_id, t1.id) is None
    moved = await task_repo.get(test_user_id, t3.id)
    assert (moved.start_date, moved.end_date) == (date(2026, 3, 5), date(2026, 3, 7))

    refreshed_goal = await SqliteGoalRepository(session_factory=session_factory).get(test_user_id, goal.id)
    assert refreshed_goal.total_tasks == 2


@pytest.mark.asyncio
async def test_commit_of_a_delete_preview(session_factory, test_user_id, plan):
    goal, (t1, t2, t3) = plan
    chain = await load_chain(session_factory, test_user_id, goal.id)
    report = DeleteImpactCalculator().calculate(chain, t1.id, today=TODAY)
    repo = SqlitePlanUpdateRepository(session_factory=session_factory)

    await repo.apply_plan_update(
        test_user_id,
        goal.id,
        report.updated_tasks,
        report.chain_version,
        task_id_to_delete=report.task_id_to_delete,
    )

    after = await load_chain(session_factory, test_user_id, goal.id)
    assert [(t.title, t.start_date) for t in after] == [
        ("T2", date(2026, 3, 2)),
        ("T3", date(2026, 3, 5)),
    ]


@pytest.mark.asyncio
async def test_anchor_added_after_preview_makes_it_stale(session_factory, test_user_id, plan):
    goal, (t1, t2, _) = plan
    task_repo = SqliteTaskRepository(session_factory=session_factory)
    chain = await load_chain(session_factory, test_user_id, goal.id)
    report = DeleteImpactCalculator().calculate(chain, t1.id, today=TODAY)

    await task_repo.create(
        test_user_id,
        TaskCreate(
            goal_id=goal.id,
            title="Fixed",
            start_date=date(2026, 3, 2),
            end_date=date(2026, 3, 3),
            is_anchored=True,
        ),
    )
    repo = SqlitePlanUpdateRepository(session_factory=session_factory)

    with pytest.raises(StalePreviewError) as exc_info:
        await repo.apply_plan_update(
            test_user_id,
            goal.id,
            report.updated_tasks,
            report.chain_version,
            task_id_to_delete=report.task_id_to_delete,
        )

    assert exc_info.value.details["expected_chain_version"] == report.chain_version
    unchanged = await task_repo.get(test_user_id, t2.id)
    assert unchanged.start_date == t2.start_date
    assert await task_repo.get(test_user_id, t1.id) is not None


@pytest.mark.asyncio
async def test_replaying_a_committed_preview_is_stale(session_factory, test_user_id, plan):
    goal, (_, t2, _) = plan
    chain = await load_chain(session_factory, test_user_id, goal.id)
    report = RescheduleImpactCalculator().calculate(chain, t2.id, date(2026, 3, 6), today=TODAY)
    repo = SqlitePlanUpdateRepository(session_factory=session_factory)

    await repo.apply_plan_update(test_user_id, goal.id, report.updated_tasks, report.chain_version)

    with pytest.raises(StalePreviewError):
        await repo.apply_plan_update(test_user_id, goal.id, report.updated_tasks, report.chain_version)

    moved = await SqliteTaskRepository(session_factory=session_factory).get(test_user_id, t2.id)
    assert moved.start_date == date(2026, 3, 6)


@pytest.mark.asyncio
async def test_failed_write_leaves_every_task_unchanged(session_factory, test_user_id, plan):
    goal, (t1, t2, t3) = plan
    repo = FailingPlanUpdateRepository(session_factory)
    task_repo = SqliteTaskRepository(session_factory=session_factory)
    chain = await load_chain(session_factory, test_user_id, goal.id)

    with pytest.raises(PersistenceError):
        await repo.apply_plan_update(
            test_user_id,
            goal.id,
            [
                TaskDateUpdate(task_id=t2.id, new_start_date=date(2026, 3, 12)),
                TaskDateUpdate(task_id=t3.id, new_start_date=date(2026, 3, 15)),
            ],
            chain.fingerprint,
            task_id_to_delete=t1.id,
        )

    assert repo.calls == 2
    assert await task_repo.get(test_user_id, t1.id) is not None
    for original in (t2, t3):
        current = await task_repo.get(test_user_id, original.id)
        assert (current.start_date, current.end_date) == (original.start_date, original.end_date)


@pytest.mark.asyncio
async def test_completed_target_is_stale(session_factory, test_user_id, plan):
    goal, (t1, t2, _) = plan
    chain = await load_chain(session_factory, test_user_id, goal.id)
    task_repo = SqliteTaskRepository(session_factory=session_factory)
    await task_repo.update(test_user_id, t2.id, TaskUpdate(status=TaskStatus.COMPLETED))
    repo = SqlitePlanUpdateRepository(session_factory=session_factory)

    with pytest.raises(StalePreviewError) as exc_info:
        await repo.apply_plan_update(
            test_user_id,
            goal.id,
            [TaskDateUpdate(task_id=t2.id, new_start_date=date(2026, 3, 2))],
            chain.fingerprint,
            task_id_to_delete=t1.id,
        )

    assert exc_info.value.details["stale_task_ids"] == [str(t2.id)]
    assert await task_repo.get(test_user_id, t1.id) is not None


@pytest.mark.asyncio
async def test_missing_or_foreign_target_is_stale(session_factory, test_user_id, plan):
    goal, (t1, _, _) = plan
    other_goal = await SqliteGoalRepository(session_factory=session_factory).create(
        test_user_id, GoalCreate(title="Other")
    )
    chain = await load_chain(session_factory, test_user_id, other_goal.id)
    repo = SqlitePlanUpdateRepository(session_factory=session_factory)
    missing_id = uuid4()

    with pytest.raises(StalePreviewError) as exc_info:
        await repo.apply_plan_update(
            test_user_id,
            other_goal.id,
            [
                TaskDateUpdate(task_id=t1.id, new_start_date=date(2026, 3, 3)),
                TaskDateUpdate(task_id=missing_id, new_start_date=date(2026, 3, 3)),
            ],
            chain.fingerprint,
        )

    assert set(exc_info.value.details["stale_task_ids"]) == {str(t1.id), str(missing_id)}


@pytest.mark.asyncio
async def test_stale_preview_is_a_persistence_error(session_factory, test_user_id, plan):
    goal, _ = plan
    repo = SqlitePlanUpdateRepository(session_factory=session_factory)

    with pytest.raises(PersistenceError):
        await repo.apply_plan_update(test_user_id, goal.id, [], "outdated", task_id_to_delete=uuid4())


@pytest.mark.asyncio
async def test_unknown_goal(session_factory, test_user_id):
    repo = SqlitePlanUpdateRepository(session_factory=session_factory)

    with pytest.raises(NotFoundError):
        await repo.apply_plan_update(
            test_user_id,
            uuid4(),
            [TaskDateUpdate(task_id=uuid4(), new_start_date=date(2026, 3, 3))],
            "any",
        )
