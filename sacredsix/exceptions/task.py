"""Task and goal exceptions."""

from .base import NotFoundError, ValidationError


class TaskNotFoundError(NotFoundError):
    """Raised when a task is not found."""

    def __init__(self, message: str = "Task not found"):
        super().__init__(message=message)


class GoalNotFoundError(NotFoundError):
    """Raised when a goal is not found."""

    def __init__(self, message: str = "Goal not found"):
        super().__init__(message=message)


class TodaySelectionError(ValidationError):
    """Raised when more tasks are selected for today than allowed."""

    def __init__(self, message: str = "You can select up to 6 tasks for today"):
        super().__init__(message=message)
