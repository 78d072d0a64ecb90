"""Sharing and collaboration exceptions."""

from .base import BaseAppException, NotFoundError


class InvitationNotFoundError(NotFoundError):
    """Raised when a share invitation id does not exist."""

    def __init__(self, message: str = "Share invitation not found"):
        super().__init__(message=message)


class StateError(BaseAppException):
    """Raised when an invitation transition is attempted from the wrong state."""

    def __init__(self, message: str = "Invitation is no longer pending", current_status: str | None = None):
        super().__init__(
            message=message,
            status_code=409,
            error_code="INVALID_STATE",
            details={"current_status": current_status} if current_status else None,
        )
