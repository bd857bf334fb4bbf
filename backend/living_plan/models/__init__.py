"""Pydantic models (schemas) for the application."""

from living_plan.models.enums import ImpactStatus, MilestoneStatus, Priority, TaskStatus
from living_plan.models.goal import Goal, GoalCreate, GoalUpdate
from living_plan.models.milestone import Milestone, MilestoneCreate, MilestoneUpdate
from living_plan.models.plan import (
    AnchoredBarrier,
    CommitRequest,
    CommitResult,
    ConflictInfo,
    ImpactReport,
    TaskDateUpdate,
)
from living_plan.models.task import Task, TaskCreate, TaskUpdate

__all__ = [
    # Enums
    "TaskStatus",
    "Priority",
    "MilestoneStatus",
    "ImpactStatus",
    # Goal
    "Goal",
    "GoalCreate",
    "GoalUpdate",
    # Milestone
    "Milestone",
    "MilestoneCreate",
    "MilestoneUpdate",
    # Task
    "Task",
    "TaskCreate",
    "TaskUpdate",
    # Plan
    "TaskDateUpdate",
    "AnchoredBarrier",
    "ConflictInfo",
    "ImpactReport",
    "CommitRequest",
    "CommitResult",
]
