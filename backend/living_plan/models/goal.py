"""
Goal model definitions.

A goal owns milestones and the chain of tasks that the living plan keeps consistent.
"""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class GoalBase(BaseModel):
    """Base goal fields."""

    title: str = Field(..., min_length=1, max_length=200, description="Goal title")
    description: Optional[str] = Field(None, max_length=2000, description="Goal description")
    target_date: Optional[date] = Field(None, description="Date the user wants to finish by")


class GoalCreate(GoalBase):
    """Schema for creating a goal."""

    pass


class GoalUpdate(BaseModel):
    """Schema for updating a goal."""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    target_date: Optional[date] = None


class Goal(GoalBase):
    """Complete goal model."""

    id: UUID
    user_id: str = Field(..., description="Owner user ID")
    total_tasks: int = Field(0, ge=0)
    completed_tasks: int = Field(0, ge=0)
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
