"""Notification collaborator used by the collaboration engine."""

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class InvitationNotifier(Protocol):
    """Delivers "a project was shared with you" notifications.

    Implementations must not block on delivery; the caller treats the call
    as fire-and-forget.
    """

    def send_invitation_email(
        self,
        recipient_email: str,
        project_name: str,
        inviter_name: str,
        message: str | None,
    ) -> None: ...


class CeleryInvitationNotifier:
    """Queues invitation emails on the ``notifications`` Celery queue."""

    def send_invitation_email(
        self,
        recipient_email: str,
        project_name: str,
        inviter_name: str,
        message: str | None,
    ) -> None:
        from sacredsix.tasks.notification_tasks import send_invitation_email_task

        result = send_invitation_email_task.delay(
            recipient_email=recipient_email,
            project_name=project_name,
            inviter_name=inviter_name,
            message=message or "",
        )
        logger.info(f"Queued invitation email to {recipient_email} (task {result.id})")


class LoggingInvitationNotifier:
    """Records invitations in the log instead of sending them."""

    def send_invitation_email(
        self,
        recipient_email: str,
        project_name: str,
        inviter_name: str,
        message: str | None,
    ) -> None:
        logger.info(
            f"Invitation email not sent (email disabled): {inviter_name} invited {recipient_email} to {project_name}"
        )


def get_invitation_notifier() -> InvitationNotifier:
    """Return the notifier matching the current configuration."""
    from sacredsix.core.config import settings

    if settings.has_email:
        return CeleryInvitationNotifier()
    return LoggingInvitationNotifier()
