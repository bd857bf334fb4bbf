"""
Milestone repository interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from living_plan.models.milestone import Milestone, MilestoneCreate, MilestoneUpdate


class IMilestoneRepository(ABC):
    """Abstract interface for milestone persistence."""

    @abstractmethod
    async def create(self, user_id: str, milestone: MilestoneCreate) -> Milestone:
        """
        Create a milestone under a goal.

        Raises:
            NotFoundError: If the goal does not exist
        """
        pass

    @abstractmethod
    async def get(self, user_id: str, milestone_id: UUID) -> Optional[Milestone]:
        """Get a milestone by ID."""
        pass

    @abstractmethod
    async def list_by_goal(self, user_id: str, goal_id: UUID) -> list[Milestone]:
        """List a goal's milestones in order."""
        pass

    @abstractmethod
    async def update(self, user_id: str, milestone_id: UUID, update: MilestoneUpdate) -> Milestone:
        """
        Update a milestone.

        Raises:
            NotFoundError: If milestone not found
        """
        pass

    @abstractmethod
    async def delete(self, user_id: str, milestone_id: UUID) -> bool:
        """Delete a milestone; its tasks are detached, not deleted."""
        pass
