"""
Goal repository interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from living_plan.models.goal import Goal, GoalCreate, GoalUpdate


class IGoalRepository(ABC):
    """Abstract interface for goal persistence."""

    @abstractmethod
    async def create(self, user_id: str, goal: GoalCreate) -> Goal:
        """Create a new goal."""
        pass

    @abstractmethod
    async def get(self, user_id: str, goal_id: UUID) -> Optional[Goal]:
        """Get a goal by ID, or None if it does not exist for this user."""
        pass

    @abstractmethod
    async def list(self, user_id: str, limit: int = 100, offset: int = 0) -> list[Goal]:
        """List the user's goals, newest first."""
        pass

    @abstractmethod
    async def update(self, user_id: str, goal_id: UUID, update: GoalUpdate) -> Goal:
        """
        Update a goal.

        Raises:
            NotFoundError: If goal not found
        """
        pass

    @abstractmethod
    async def delete(self, user_id: str, goal_id: UUID) -> bool:
        """Delete a goal with its milestones and tasks. Returns False if not found."""
        pass
