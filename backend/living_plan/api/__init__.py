"""API routers."""

from living_plan.api import goals, living_plan, tasks

__all__ = ["goals", "living_plan", "tasks"]
