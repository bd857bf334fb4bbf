"""
Dependency injection for API endpoints.

This module provides FastAPI dependencies that inject the local SQLite
repositories and the process-wide living plan service.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from living_plan.core.config import get_settings
from living_plan.core.exceptions import AuthenticationError
from living_plan.infrastructure.local.mock_auth import DEV_USER
from living_plan.interfaces.auth_provider import IAuthProvider, User
from living_plan.interfaces.goal_repository import IGoalRepository
from living_plan.interfaces.milestone_repository import IMilestoneRepository
from living_plan.interfaces.plan_update_repository import IPlanUpdateRepository
from living_plan.interfaces.task_repository import ITaskRepository
from living_plan.services.commit_applier import CommitApplier
from living_plan.services.living_plan_service import LivingPlanService


# ===========================================
# Repository Dependencies
# ===========================================


@lru_cache()
def get_task_repository() -> ITaskRepository:
    """Get task repository instance."""
    from living_plan.infrastructure.local.task_repository import SqliteTaskRepository

    return SqliteTaskRepository()


@lru_cache()
def get_goal_repository() -> IGoalRepository:
    """Get goal repository instance."""
    from living_plan.infrastructure.local.goal_repository import SqliteGoalRepository

    return SqliteGoalRepository()


@lru_cache()
def get_milestone_repository() -> IMilestoneRepository:
    """Get milestone repository instance."""
    from living_plan.infrastructure.local.milestone_repository import SqliteMilestoneRepository

    return SqliteMilestoneRepository()


@lru_cache()
def get_plan_update_repository() -> IPlanUpdateRepository:
    """Get plan update repository instance."""
    from living_plan.infrastructure.local.plan_update_repository import SqlitePlanUpdateRepository

    return SqlitePlanUpdateRepository()


# ===========================================
# Service Dependencies
# ===========================================


@lru_cache()
def get_commit_applier() -> CommitApplier:
    """Get the process-wide commit applier (owns the per-goal commit locks)."""
    settings = get_settings()
    return CommitApplier(
        get_plan_update_repository(),
        timeout_seconds=settings.COMMIT_TIMEOUT_SECONDS,
    )


@lru_cache()
def get_living_plan_service() -> LivingPlanService:
    """Get living plan service instance."""
    settings = get_settings()
    return LivingPlanService(
        get_task_repository(),
        get_goal_repository(),
        get_commit_applier(),
        hours_per_day=settings.HOURS_PER_DAY,
    )


# ===========================================
# User Authentication
# ===========================================


@lru_cache()
def get_auth_provider() -> IAuthProvider:
    """Get auth provider instance."""
    settings = get_settings()
    from living_plan.infrastructure.local.mock_auth import MockAuthProvider

    return MockAuthProvider(enabled=settings.AUTH_REQUIRED)


async def get_current_user(
    authorization: Annotated[str | None, Header()] = None,
    auth_provider: IAuthProvider = Depends(get_auth_provider),
) -> User:
    """
    Get current authenticated user.

    When authentication is disabled, returns the development user.
    """
    if not auth_provider.is_enabled():
        return DEV_USER

    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required",
        )

    # Extract token from "Bearer <token>"
    try:
        scheme, token = authorization.split()
        if scheme.lower() != "bearer":
            raise ValueError("Invalid scheme")
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
        )

    try:
        return await auth_provider.verify_token(token)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
        )


# ===========================================
# Type Aliases for Annotated Dependencies
# ===========================================

CurrentUser = Annotated[User, Depends(get_current_user)]
TaskRepo = Annotated[ITaskRepository, Depends(get_task_repository)]
GoalRepo = Annotated[IGoalRepository, Depends(get_goal_repository)]
MilestoneRepo = Annotated[IMilestoneRepository, Depends(get_milestone_repository)]
LivingPlan = Annotated[LivingPlanService, Depends(get_living_plan_service)]
