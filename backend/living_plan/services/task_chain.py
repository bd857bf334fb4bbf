"""
Task chain: the ordered, derived view of one goal's open tasks.

The chain is rebuilt from the current task set at the start of every
calculation and is never stored.
"""

from __future__ import annotations

import hashlib
from datetime import date
from typing import Iterable, Optional
from uuid import UUID

from living_plan.core.exceptions import NotFoundError
from living_plan.models.task import Task


def _chain_key(task: Task):
    # Tasks without a start date sort last
    return (
        task.start_date is None,
        task.start_date or date.max,
        task.created_at,
        str(task.id),
    )


def chain_fingerprint(tasks: Iterable[Task]) -> str:
    """
    Version string of a chain's scheduling state.

    Covers every field the calculators read, so any date, duration, anchor or
    membership change between preview and commit yields a different value.
    Titles and descriptions are not part of it.
    """
    digest = hashlib.sha256()
    for task in sorted(tasks, key=lambda t: str(t.id)):
        digest.update(
            f"{task.id}|{task.start_date}|{task.end_date}|{task.duration_hours}|"
            f"{int(task.is_anchored)}\n".encode()
        )
    return digest.hexdigest()


def partition(tasks: Iterable[Task]) -> tuple[list[Task], list[Task]]:
    """Split tasks into (anchored, floating), keeping their order."""
    anchored: list[Task] = []
    floating: list[Task] = []
    for task in tasks:
        (anchored if task.is_anchored else floating).append(task)
    return anchored, floating


class TaskChain:
    """Non-completed tasks of one goal ordered by start date."""

    def __init__(self, goal_id: UUID, tasks: Iterable[Task]):
        self.goal_id = goal_id
        self._tasks = sorted(
            (t for t in tasks if t.goal_id == goal_id and not t.is_completed),
            key=_chain_key,
        )
        self._by_id = {t.id: t for t in self._tasks}

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self):
        return iter(self._tasks)

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    @property
    def fingerprint(self) -> str:
        return chain_fingerprint(self._tasks)

    def get(self, task_id: UUID) -> Optional[Task]:
        return self._by_id.get(task_id)

    def require(self, task_id: UUID) -> Task:
        """
        Get a task that must be part of this chain.

        Raises:
            NotFoundError: If the task is not an open task of this goal
        """
        task = self._by_id.get(task_id)
        if task is None:
            raise NotFoundError(f"Task {task_id} not found in goal {self.goal_id}")
        return task

    @staticmethod
    def position_of(task: Task) -> date:
        """Chain position of a task: its start date, else the day it was created."""
        return task.start_date or task.created_at.date()

    def downstream_of(self, task: Task) -> list[Task]:
        """Positioned tasks starting strictly after the given task, in chain order."""
        position = self.position_of(task)
        return [
            t for t in self._tasks
            if t.id != task.id and t.start_date is not None and t.start_date > position
        ]

    def upstream_of(self, task: Task) -> list[Task]:
        """Positioned tasks starting strictly before the given task."""
        position = self.position_of(task)
        return [
            t for t in self._tasks
            if t.id != task.id and t.start_date is not None and t.start_date < position
        ]

    @staticmethod
    def nearest_preceding_anchor(task: Task, within: Iterable[Task]) -> Optional[Task]:
        """
        Latest-starting anchored task in `within` that starts before `task`.

        Returns None when the task has no start date or nothing precedes it.
        """
        if task.start_date is None:
            return None
        nearest: Optional[Task] = None
        for candidate in within:
            if not candidate.is_anchored or candidate.start_date is None:
                continue
            if candidate.id == task.id or candidate.start_date >= task.start_date:
                continue
            if nearest is None or candidate.start_date > nearest.start_date:
                nearest = candidate
        return nearest
