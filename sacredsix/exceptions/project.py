"""Project-related exceptions."""

from .base import BaseAppException, NotFoundError


class ProjectNotFoundError(NotFoundError):
    """Raised when a project id does not exist."""

    def __init__(self, message: str = "Project not found"):
        super().__init__(message=message)


class CapacityExceededError(BaseAppException):
    """Raised when an owner already has the maximum number of sacred projects."""

    def __init__(
        self,
        message: str = "Maximum of 6 sacred projects allowed. Unmark an existing sacred project first.",
        limit: int = 6,
    ):
        super().__init__(
            message=message,
            status_code=409,
            error_code="SACRED_CAPACITY_EXCEEDED",
            details={"limit": limit},
        )
