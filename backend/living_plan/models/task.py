"""
Task model definitions.

Tasks are the links of a goal's chain. Anchored tasks are fixed commitments;
floating tasks absorb schedule changes made elsewhere in the chain.
"""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from living_plan.models.enums import Priority, TaskStatus


class TaskBase(BaseModel):
    """Base task fields shared across create/read."""

    goal_id: UUID = Field(..., description="Owning goal ID")
    milestone_id: Optional[UUID] = Field(None, description="Owning milestone ID")
    title: str = Field(..., min_length=1, max_length=500, description="Task title")
    description: Optional[str] = Field(None, max_length=2000)
    priority: Optional[Priority] = None
    start_date: Optional[date] = Field(None, description="First day of the task")
    end_date: Optional[date] = Field(None, description="Last day of the task (inclusive)")
    duration_hours: Optional[float] = Field(
        None,
        gt=0,
        description="Estimated effort, used for the date span when end_date is absent",
    )
    is_anchored: bool = Field(
        False,
        description="Fixed commitment; never moved by changes to other tasks",
    )

    @model_validator(mode="after")
    def validate_dates(self):
        """End date cannot precede the start date."""
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self


class TaskCreate(TaskBase):
    """Schema for creating a new task."""

    pass


class TaskUpdate(BaseModel):
    """Schema for a direct single-task edit."""

    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = Field(None, max_length=2000)
    priority: Optional[Priority] = None
    milestone_id: Optional[UUID] = None
    status: Optional[TaskStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    duration_hours: Optional[float] = Field(None, gt=0)
    is_anchored: Optional[bool] = None


class Task(TaskBase):
    """Complete task model with all fields."""

    id: UUID
    user_id: str = Field(..., description="Owner user ID")
    status: TaskStatus = Field(TaskStatus.PENDING)
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED
