"""
Date-span math shared by the delete and reschedule calculators.

Every span in the living plan is an inclusive range of calendar days:
a task running from the 3rd to the 5th occupies three days.
"""

from __future__ import annotations

from datetime import date, timedelta
from math import ceil
from typing import Optional

from living_plan.models.plan import TaskDateUpdate
from living_plan.models.task import Task

DEFAULT_HOURS_PER_DAY = 8

DateWindow = tuple[date, date]


def hours_to_days(duration_hours: float, hours_per_day: int = DEFAULT_HOURS_PER_DAY) -> int:
    """Convert effort hours to whole calendar days, rounding up."""
    return max(1, ceil(duration_hours / hours_per_day))


def span_days(task: Task, hours_per_day: int = DEFAULT_HOURS_PER_DAY) -> int:
    """
    Number of days a task occupies.

    Explicit dates win, then duration_hours; a task with neither counts as
    a single day.
    """
    if task.start_date and task.end_date:
        return (task.end_date - task.start_date).days + 1
    if task.duration_hours:
        return hours_to_days(task.duration_hours, hours_per_day)
    return 1


def effective_end(task: Task, hours_per_day: int = DEFAULT_HOURS_PER_DAY) -> Optional[date]:
    """Last day of a task, derived from duration_hours when end_date is absent."""
    if task.end_date:
        return task.end_date
    if task.start_date is None:
        return None
    return task.start_date + timedelta(days=span_days(task, hours_per_day) - 1)


def task_window(task: Task, hours_per_day: int = DEFAULT_HOURS_PER_DAY) -> Optional[DateWindow]:
    """Inclusive [start, end] window of a positioned task."""
    if task.start_date is None:
        return None
    return task.start_date, effective_end(task, hours_per_day)


def update_window(update: TaskDateUpdate) -> DateWindow:
    return update.new_start_date, update.new_end_date or update.new_start_date


def shift_to(
    task: Task,
    new_start: date,
    hours_per_day: int = DEFAULT_HOURS_PER_DAY,
) -> TaskDateUpdate:
    """
    Move a task to start on new_start without changing its length.

    Tasks with neither end_date nor duration_hours keep no end date.
    """
    new_end = None
    if task.end_date or task.duration_hours:
        new_end = new_start + timedelta(days=span_days(task, hours_per_day) - 1)
    return TaskDateUpdate(task_id=task.id, new_start_date=new_start, new_end_date=new_end)


def overlap_days(a: DateWindow, b: DateWindow) -> int:
    """Number of days two inclusive windows share (0 if disjoint)."""
    start = max(a[0], b[0])
    end = min(a[1], b[1])
    if end < start:
        return 0
    return (end - start).days + 1


def available_days(barrier: Task, task_start: date, hours_per_day: int = DEFAULT_HOURS_PER_DAY) -> int:
    """
    Free days strictly between a barrier's last day and a task's first day.

    Zero or less means the task is already flush against (or on top of) the barrier.
    """
    barrier_end = effective_end(barrier, hours_per_day)
    return (task_start - barrier_end).days - 1


def intrusion_days(window: DateWindow, anchor_window: DateWindow, from_before: bool) -> int:
    """
    Days a window reaches into or across an anchored window.

    Measured from the side the task sat on: a task that was before the anchor
    intrudes by how far its end passes the anchor's start, and vice versa.
    """
    if from_before:
        return max(0, (window[1] - anchor_window[0]).days + 1)
    return max(0, (anchor_window[1] - window[0]).days + 1)


def is_past_today(day: date, today: date) -> bool:
    return day < today
