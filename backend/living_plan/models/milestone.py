"""
Milestone model definitions.

Milestones group a goal's tasks into checkpoints.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from living_plan.models.enums import MilestoneStatus


class MilestoneBase(BaseModel):
    """Base milestone fields."""

    goal_id: UUID = Field(..., description="Goal ID")
    title: str = Field(..., min_length=1, max_length=200, description="Milestone title")
    order_index: Optional[int] = Field(None, ge=0, description="Order within the goal")


class MilestoneCreate(MilestoneBase):
    """Schema for creating a milestone."""

    pass


class MilestoneUpdate(BaseModel):
    """Schema for updating a milestone."""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    order_index: Optional[int] = Field(None, ge=0)
    status: Optional[MilestoneStatus] = None


class Milestone(MilestoneBase):
    """Complete milestone model."""

    id: UUID
    user_id: str = Field(..., description="Owner user ID")
    status: MilestoneStatus = Field(MilestoneStatus.PENDING)
    total_tasks: int = Field(0, ge=0)
    completed_tasks: int = Field(0, ge=0)
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
