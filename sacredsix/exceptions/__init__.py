"""Application exception taxonomy."""

from .base import (
    AuthorizationError,
    BaseAppException,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from .collaboration import InvitationNotFoundError, StateError
from .project import CapacityExceededError, ProjectNotFoundError
from .task import GoalNotFoundError, TaskNotFoundError, TodaySelectionError

__all__ = [
    "AuthorizationError",
    "BaseAppException",
    "CapacityExceededError",
    "ConflictError",
    "GoalNotFoundError",
    "InvitationNotFoundError",
    "NotFoundError",
    "ProjectNotFoundError",
    "StateError",
    "TaskNotFoundError",
    "TodaySelectionError",
    "ValidationError",
]
