"""Celery tasks for notifications."""

import logging

from sacredsix.celery_app import celery_app
from sacredsix.services.email_service import email_service

logger = logging.getLogger(__name__)


class EmailDeliveryError(RuntimeError):
    """Raised inside the task so Celery retries a failed delivery."""


@celery_app.task(
    name="sacredsix.tasks.notification_tasks.send_invitation_email_task",
    bind=True,
    max_retries=3,
)
def send_invitation_email_task(
    self,
    recipient_email: str,
    project_name: str,
    inviter_name: str,
    message: str = "",
) -> bool:
    """Send a share invitation email, retrying with backoff on failure."""
    logger.info(f"Sending invitation email to {recipient_email} (task {self.request.id})")

    sent = email_service.send_invitation_email(
        recipient_email=recipient_email,
        project_name=project_name,
        inviter_name=inviter_name,
        message=message,
    )
    if not sent:
        raise self.retry(
            exc=EmailDeliveryError(f"Could not deliver invitation to {recipient_email}"),
            countdown=60 * (2 ** self.request.retries),
        )
    return True
