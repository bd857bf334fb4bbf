"""
Task repository interface.

Defines the contract for task persistence operations.
Implementations: SQLite
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from living_plan.models.task import Task, TaskCreate, TaskUpdate


class ITaskRepository(ABC):
    """Abstract interface for task persistence."""

    @abstractmethod
    async def create(self, user_id: str, task: TaskCreate) -> Task:
        """
        Create a new task.

        Args:
            user_id: Owner user ID
            task: Task creation data

        Returns:
            Created task with generated ID and timestamps

        Raises:
            NotFoundError: If the goal or milestone does not exist
        """
        pass

    @abstractmethod
    async def get(self, user_id: str, task_id: UUID) -> Optional[Task]:
        """
        Get a task by ID.

        Args:
            user_id: Owner user ID
            task_id: Task ID

        Returns:
            Task if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_by_goal(
        self,
        user_id: str,
        goal_id: UUID,
        include_completed: bool = False,
    ) -> list[Task]:
        """
        List a goal's tasks ordered by start date (undated tasks last).

        Args:
            user_id: Owner user ID
            goal_id: Goal ID
            include_completed: Include completed tasks

        Returns:
            Tasks of the goal
        """
        pass

    async def list_chain(self, user_id: str, goal_id: UUID) -> list[Task]:
        """Point read of a goal's full non-completed task set."""
        return await self.list_by_goal(user_id, goal_id, include_completed=False)

    @abstractmethod
    async def update(self, user_id: str, task_id: UUID, update: TaskUpdate) -> Task:
        """
        Update an existing task (direct single-task edit).

        Args:
            user_id: Owner user ID
            task_id: Task ID to update
            update: Fields to update

        Returns:
            Updated task

        Raises:
            NotFoundError: If task not found
        """
        pass

    @abstractmethod
    async def delete(self, user_id: str, task_id: UUID) -> bool:
        """
        Delete a task.

        Args:
            user_id: Owner user ID
            task_id: Task ID to delete

        Returns:
            True if deleted, False if not found
        """
        pass
