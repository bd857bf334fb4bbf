"""Abstract interfaces for infrastructure abstraction."""

from living_plan.interfaces.auth_provider import IAuthProvider, User
from living_plan.interfaces.goal_repository import IGoalRepository
from living_plan.interfaces.milestone_repository import IMilestoneRepository
from living_plan.interfaces.plan_update_repository import IPlanUpdateRepository
from living_plan.interfaces.task_repository import ITaskRepository

__all__ = [
    "IAuthProvider",
    "User",
    "IGoalRepository",
    "IMilestoneRepository",
    "IPlanUpdateRepository",
    "ITaskRepository",
]
