"""
Living plan model definitions.

Impact reports are previews of a delete or reschedule; they are never
persisted. A commit request carries a report's updates back for atomic
application.
"""

from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from living_plan.models.enums import ImpactStatus


class TaskDateUpdate(BaseModel):
    """New dates for one task."""

    task_id: UUID
    new_start_date: date
    new_end_date: Optional[date] = None

    @model_validator(mode="after")
    def validate_span(self):
        if self.new_end_date and self.new_end_date < self.new_start_date:
            raise ValueError("new_end_date must be on or after new_start_date")
        return self


class AnchoredBarrier(BaseModel):
    """An anchored task that blocked or bounded a cascade."""

    task_id: UUID
    title: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class ConflictInfo(BaseModel):
    """Details of the anchored task a reschedule would run into."""

    anchored_task_id: UUID
    anchored_task_title: str
    compression_needed_in_days: int = Field(..., ge=1)


class ImpactReport(BaseModel):
    """Preview of what a delete or reschedule would change."""

    status: ImpactStatus
    updated_tasks: list[TaskDateUpdate] = Field(default_factory=list)
    anchored_barriers: list[AnchoredBarrier] = Field(default_factory=list)
    message: str = ""

    # Delete previews
    task_id_to_delete: Optional[UUID] = None
    time_saved_in_days: Optional[int] = None
    dependency_issues: list[str] = Field(default_factory=list)
    blocked_task_ids: list[UUID] = Field(
        default_factory=list,
        description="Floating tasks already flush against their barrier",
    )

    # Reschedule previews
    time_shift_in_days: Optional[int] = None
    conflict_info: Optional[ConflictInfo] = None

    chain_version: Optional[str] = Field(
        None,
        description="Fingerprint of the chain the preview was calculated on; echo it back on commit",
    )

    @classmethod
    def error(cls, message: str) -> "ImpactReport":
        """Report for a preview that could not be calculated."""
        return cls(status=ImpactStatus.ERROR, message=message)


class DeleteImpactRequest(BaseModel):
    """Request body for a delete preview."""

    task_id: UUID
    today: Optional[date] = Field(None, description="Caller's current date")


class RescheduleImpactRequest(BaseModel):
    """Request body for a reschedule preview."""

    task_id: UUID
    new_start_date: date
    today: Optional[date] = Field(None, description="Caller's current date")


class CommitRequest(BaseModel):
    """Request body for applying a previewed plan change."""

    updated_tasks: list[TaskDateUpdate] = Field(default_factory=list)
    task_id_to_delete: Optional[UUID] = None
    chain_version: str = Field(..., min_length=1, description="chain_version of the previewed report")

    @model_validator(mode="after")
    def validate_batch(self):
        task_ids = [update.task_id for update in self.updated_tasks]
        if len(task_ids) != len(set(task_ids)):
            raise ValueError("updated_tasks contains the same task more than once")
        if self.task_id_to_delete and self.task_id_to_delete in task_ids:
            raise ValueError("task_id_to_delete cannot also be updated")
        if not task_ids and not self.task_id_to_delete:
            raise ValueError("Nothing to commit")
        return self


class CommitResult(BaseModel):
    """Outcome of a successful commit."""

    status: str = "success"
    goal_id: UUID
    updated_count: int = 0
    deleted_task_id: Optional[UUID] = None
