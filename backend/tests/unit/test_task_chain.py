"""
Unit tests for the task chain view.
"""

from datetime import date, datetime, timedelta
from uuid import uuid4

import pytest

from living_plan.core.exceptions import NotFoundError
from living_plan.models.enums import TaskStatus
from living_plan.models.task import Task
from living_plan.services.task_chain import TaskChain, partition

GOAL_ID = uuid4()
BASE = datetime(2026, 1, 1, 9, 0)


def make_task(
    title: str,
    start=None,
    end=None,
    is_anchored: bool = False,
    status: TaskStatus = TaskStatus.PENDING,
    goal_id=GOAL_ID,
    created_offset: int = 0,
) -> Task:
    created = BASE + timedelta(minutes=created_offset)
    return Task(
        id=uuid4(),
        user_id="test-user",
        goal_id=goal_id,
        title=title,
        start_date=start,
        end_date=end,
        is_anchored=is_anchored,
        status=status,
        created_at=created,
        updated_at=created,
    )


def test_chain_orders_by_start_date_with_undated_last():
    undated = make_task("Undated")
    later = make_task("Later", date(2026, 3, 10))
    earlier = make_task("Earlier", date(2026, 3, 2))

    chain = TaskChain(GOAL_ID, [undated, later, earlier])

    assert [t.title for t in chain] == ["Earlier", "Later", "Undated"]


def test_chain_excludes_completed_and_foreign_tasks():
    done = make_task("Done", date(2026, 3, 2), status=TaskStatus.COMPLETED)
    foreign = make_task("Other goal", date(2026, 3, 3), goal_id=uuid4())
    open_task = make_task("Open", date(2026, 3, 4))

    chain = TaskChain(GOAL_ID, [done, foreign, open_task])

    assert len(chain) == 1
    assert chain.get(done.id) is None
    assert chain.require(open_task.id) is open_task


def test_require_missing_task_raises_not_found():
    chain = TaskChain(GOAL_ID, [])
    with pytest.raises(NotFoundError):
        chain.require(uuid4())


def test_downstream_is_strictly_later_and_skips_undated():
    first = make_task("First", date(2026, 3, 2))
    same_day = make_task("Same day", date(2026, 3, 2), created_offset=1)
    second = make_task("Second", date(2026, 3, 5))
    undated = make_task("Undated")
    chain = TaskChain(GOAL_ID, [first, same_day, second, undated])

    assert chain.downstream_of(first) == [second]
    assert chain.upstream_of(second) == [first, same_day]


def test_downstream_of_undated_task_uses_creation_day():
    undated = make_task("Undated")  # created 2026-01-01
    dated = make_task("Dated", date(2026, 3, 2))
    chain = TaskChain(GOAL_ID, [undated, dated])

    assert chain.downstream_of(undated) == [dated]


def test_nearest_preceding_anchor_picks_latest_earlier_anchor():
    a1 = make_task("A1", date(2026, 3, 3), is_anchored=True)
    a2 = make_task("A2", date(2026, 3, 6), is_anchored=True)
    a3 = make_task("A3", date(2026, 3, 12), is_anchored=True)
    floating = make_task("F", date(2026, 3, 9))

    assert TaskChain.nearest_preceding_anchor(floating, [a1, a2, a3]) is a2
    assert TaskChain.nearest_preceding_anchor(a1, [a1, a2, a3]) is None
    assert TaskChain.nearest_preceding_anchor(make_task("Undated"), [a1]) is None


def test_nearest_preceding_anchor_ignores_floating_candidates():
    floating_before = make_task("F0", date(2026, 3, 3))
    task = make_task("F1", date(2026, 3, 9))
    assert TaskChain.nearest_preceding_anchor(task, [floating_before]) is None


def test_partition_keeps_order():
    a = make_task("A", date(2026, 3, 3), is_anchored=True)
    f1 = make_task("F1", date(2026, 3, 4))
    f2 = make_task("F2", date(2026, 3, 5))
    anchored, floating = partition([f1, a, f2])
    assert anchored == [a]
    assert floating == [f1, f2]


class TestFingerprint:
    def test_stable_across_input_order_and_title_edits(self):
        t1 = make_task("T1", date(2026, 3, 2), date(2026, 3, 4))
        t2 = make_task("T2", date(2026, 3, 5))
        renamed = t2.model_copy(update={"title": "Renamed"})

        assert TaskChain(GOAL_ID, [t1, t2]).fingerprint == TaskChain(GOAL_ID, [renamed, t1]).fingerprint

    def test_changes_when_a_task_moves(self):
        t1 = make_task("T1", date(2026, 3, 2), date(2026, 3, 4))
        moved = t1.model_copy(update={"start_date": date(2026, 3, 3)})

        assert TaskChain(GOAL_ID, [t1]).fingerprint != TaskChain(GOAL_ID, [moved]).fingerprint

    def test_changes_when_an_anchor_is_added(self):
        t1 = make_task("T1", date(2026, 3, 2), date(2026, 3, 4))
        anchor = make_task("Fixed", date(2026, 3, 2), date(2026, 3, 3), is_anchored=True)

        assert TaskChain(GOAL_ID, [t1]).fingerprint != TaskChain(GOAL_ID, [t1, anchor]).fingerprint

    def test_changes_when_a_task_is_completed_or_anchored(self):
        t1 = make_task("T1", date(2026, 3, 2))
        t2 = make_task("T2", date(2026, 3, 5))
        base = TaskChain(GOAL_ID, [t1, t2]).fingerprint

        completed = t2.model_copy(update={"status": TaskStatus.COMPLETED})
        anchored = t2.model_copy(update={"is_anchored": True})

        assert TaskChain(GOAL_ID, [t1, completed]).fingerprint != base
        assert TaskChain(GOAL_ID, [t1, anchored]).fingerprint != base
