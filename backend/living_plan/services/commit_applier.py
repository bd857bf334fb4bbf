"""
Commit applier: the only component that writes a previewed plan change.

Commits to the same goal are serialised so that a second commit always sees
the first one's result; commits to different goals run independently.
"""

from __future__ import annotations

import asyncio
from typing import Optional
from uuid import UUID

from living_plan.core.exceptions import PersistenceError, ValidationError
from living_plan.core.logger import setup_logger
from living_plan.interfaces.plan_update_repository import IPlanUpdateRepository
from living_plan.models.plan import CommitResult, TaskDateUpdate

logger = setup_logger(__name__)


class CommitApplier:
    """Applies impact report updates atomically, one commit per goal at a time."""

    def __init__(self, plan_repo: IPlanUpdateRepository, timeout_seconds: float = 10.0):
        """
        Initialize applier.

        Args:
            plan_repo: Repository performing the transactional write
            timeout_seconds: Upper bound for waiting on the goal lock plus the write
        """
        self._plan_repo = plan_repo
        self._timeout_seconds = timeout_seconds
        # Only goals with a commit in flight or waiting have an entry
        self._goal_locks: dict[UUID, asyncio.Lock] = {}
        self._lock_users: dict[UUID, int] = {}

    async def _apply_serialised(
        self,
        user_id: str,
        goal_id: UUID,
        updates: list[TaskDateUpdate],
        chain_version: str,
        task_id_to_delete: Optional[UUID],
    ) -> CommitResult:
        lock = self._goal_locks.setdefault(goal_id, asyncio.Lock())
        self._lock_users[goal_id] = self._lock_users.get(goal_id, 0) + 1
        try:
            async with lock:
                return await self._plan_repo.apply_plan_update(
                    user_id,
                    goal_id,
                    updates,
                    chain_version,
                    task_id_to_delete=task_id_to_delete,
                )
        finally:
            self._lock_users[goal_id] -= 1
            if not self._lock_users[goal_id]:
                del self._lock_users[goal_id]
                del self._goal_locks[goal_id]

    async def commit(
        self,
        user_id: str,
        goal_id: UUID,
        updates: list[TaskDateUpdate],
        chain_version: str,
        task_id_to_delete: Optional[UUID] = None,
    ) -> CommitResult:
        """
        Apply every update (and the optional deletion) or none of them.

        Raises:
            ValidationError: If the batch is empty or repeats a task
            NotFoundError: If the goal does not exist
            StalePreviewError: If the chain drifted since the preview
            PersistenceError: If the write failed or timed out
        """
        task_ids = [update.task_id for update in updates]
        if not task_ids and task_id_to_delete is None:
            raise ValidationError("Nothing to commit")
        if len(task_ids) != len(set(task_ids)) or task_id_to_delete in task_ids:
            raise ValidationError("Each task may appear only once in a commit")

        try:
            return await asyncio.wait_for(
                self._apply_serialised(user_id, goal_id, updates, chain_version, task_id_to_delete),
                timeout=self._timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            # A commit already handed to the database may still land
            logger.error(f"Plan commit for goal {goal_id} timed out after {self._timeout_seconds}s")
            raise PersistenceError(
                f"Plan commit timed out after {self._timeout_seconds} seconds; it may or may not "
                "have been applied. Reload the goal before retrying",
                details={"outcome": "unknown"},
            ) from exc
