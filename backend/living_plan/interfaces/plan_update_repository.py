"""
Plan update repository interface.

The only persistence path through which a previewed impact report changes
task dates.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from living_plan.models.plan import CommitResult, TaskDateUpdate


class IPlanUpdateRepository(ABC):
    """Abstract interface for atomic plan writes."""

    @abstractmethod
    async def apply_plan_update(
        self,
        user_id: str,
        goal_id: UUID,
        updates: list[TaskDateUpdate],
        chain_version: str,
        task_id_to_delete: Optional[UUID] = None,
    ) -> CommitResult:
        """
        Apply a batch of date updates and an optional deletion in one transaction.

        The goal's open chain must still match chain_version and every target
        must still be an open task of the goal. Goal and milestone task
        counters are recomputed in the same transaction.

        Args:
            user_id: Owner user ID
            goal_id: Goal whose chain is being changed
            updates: New dates per task
            chain_version: Fingerprint of the chain the preview was calculated on
            task_id_to_delete: Task removed by a delete preview

        Returns:
            CommitResult describing what was applied

        Raises:
            NotFoundError: If the goal does not exist
            StalePreviewError: If the chain changed since the preview
            PersistenceError: If the write failed; the transaction was rolled back
        """
        pass
