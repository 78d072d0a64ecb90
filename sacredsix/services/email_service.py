"""Email service for sending notifications."""

import html
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from sacredsix.core.config import settings

logger = logging.getLogger(__name__)


class EmailService:
    """Service for sending emails via SMTP."""

    def __init__(self):
        """Initialize email service with SMTP configuration."""
        self.smtp_host = settings.smtp_host
        self.smtp_port = settings.smtp_port
        self.smtp_user = settings.smtp_user
        self.smtp_password = settings.smtp_password
        self.from_email = settings.email_from or settings.smtp_user

    def _validate_config(self) -> bool:
        """Validate email configuration."""
        if not all([self.smtp_host, self.smtp_user, self.smtp_password]):
            logger.warning("Email service not configured properly")
            return False
        return True

    def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: str | None = None,
    ) -> bool:
        """Send an email via SMTP.

        Args:
            to_email: Recipient email address
            subject: Email subject
            html_content: HTML content of the email
            text_content: Plain text content (fallback)

        Returns:
            True if email sent successfully, False otherwise
        """
        if not self._validate_config():
            logger.error("Cannot send email - configuration invalid")
            return False

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.from_email
        msg["To"] = to_email

        if text_content:
            msg.attach(MIMEText(text_content, "plain"))
        msg.attach(MIMEText(html_content, "html"))

        logger.info(f"Sending email to {to_email} with subject: {subject}")
        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                server.starttls()
                server.login(self.smtp_user, self.smtp_password)
                server.send_message(msg)
        except smtplib.SMTPAuthenticationError as e:
            logger.error(f"SMTP authentication failed: {str(e)}")
            return False
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"SMTP error sending email to {to_email}: {str(e)}")
            return False

        logger.info(f"Email sent successfully to {to_email}")
        return True

    def send_invitation_email(
        self,
        recipient_email: str,
        project_name: str,
        inviter_name: str,
        message: str | None = None,
    ) -> bool:
        """Send the "project shared with you" email.

        Returns:
            True if email sent successfully, False otherwise
        """
        subject = f"{inviter_name} shared a Sacred Six project with you: {project_name}"
        return self.send_email(
            recipient_email,
            subject,
            self._generate_invitation_html(project_name, inviter_name, message),
            self._generate_invitation_text(project_name, inviter_name, message),
        )

    def _generate_invitation_html(
        self, project_name: str, inviter_name: str, message: str | None
    ) -> str:
        """Generate HTML content for the invitation email."""
        message_html = (
            f'<p style="color: #374151; font-style: italic;">"{html.escape(message)}"</p>'
            if message
            else ""
        )
        return f"""
        <!DOCTYPE html>
        <html>
        <head><meta charset="UTF-8"><title>Shared Project</title></head>
        <body style="margin: 0; padding: 20px; font-family: -apple-system, 'Segoe UI', Roboto, Arial, sans-serif; background-color: #f3f4f6;">
            <div style="max-width: 600px; margin: 0 auto; background-color: white; border-radius: 12px; padding: 30px;">
                <h1 style="color: #1f2937; font-size: 24px;">Sacred Six Productivity - Shared Project</h1>
                <p style="color: #374151; font-size: 16px;">
                    <strong>{html.escape(inviter_name)}</strong> has shared a project with you:
                    <strong>{html.escape(project_name)}</strong>
                </p>
                {message_html}
                <p style="color: #6b7280; font-size: 15px;">
                    Log in to your Sacred Six account to accept or reject this invitation.
                </p>
                <a href="{settings.frontend_url}/dashboard/shared-projects"
                   style="display: inline-block; background-color: #4f46e5; color: white; text-decoration: none; padding: 12px 30px; border-radius: 8px;">
                    View invitation
                </a>
            </div>
        </body>
        </html>
        """

    def _generate_invitation_text(
        self, project_name: str, inviter_name: str, message: str | None
    ) -> str:
        """Generate plain text content for the invitation email."""
        text = f"{inviter_name} has shared a project with you: {project_name}\n\n"
        if message:
            text += f'Message: "{message}"\n\n'
        text += "Log in to your Sacred Six account to accept or reject this invitation:\n"
        text += f"{settings.frontend_url}/dashboard/shared-projects\n"
        return text


# Create singleton instance
email_service = EmailService()
