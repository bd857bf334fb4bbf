"""
Custom exceptions for the application.
"""

from typing import Any, Optional


class LivingPlanError(Exception):
    """Base exception for living_plan."""

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class NotFoundError(LivingPlanError):
    """Resource not found."""

    pass


class ValidationError(LivingPlanError):
    """Validation error."""

    pass


class PersistenceError(LivingPlanError):
    """The atomic plan write failed or did not finish in time."""

    pass


class StalePreviewError(PersistenceError):
    """The goal's chain changed between preview and commit.

    The caller must recompute the impact report before committing again.
    """

    pass


class AuthenticationError(LivingPlanError):
    """Authentication failed."""

    pass


class InfrastructureError(LivingPlanError):
    """Infrastructure-related error (DB, external services, etc.)."""

    pass
