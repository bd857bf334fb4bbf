"""
Enum definitions for the application.
"""

from enum import Enum


class TaskStatus(str, Enum):
    """Task status."""

    PENDING = "pending"
    COMPLETED = "completed"


class Priority(str, Enum):
    """Task priority."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class MilestoneStatus(str, Enum):
    """Milestone status."""

    PENDING = "pending"
    COMPLETED = "completed"


class ImpactStatus(str, Enum):
    """Outcome of a delete or reschedule preview."""

    SUCCESS = "success"
    DEPENDENCY_CONFLICT = "dependency_conflict"  # delete would schedule work in the past
    RESCHEDULE_CONFLICT = "reschedule_conflict"  # moved tail runs into an anchored task
    ERROR = "error"
