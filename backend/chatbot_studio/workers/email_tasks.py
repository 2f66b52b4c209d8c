"""
Celery tasks for outbound email.
"""
import smtplib
from email.message import EmailMessage

from celery import shared_task
from celery.utils.log import get_task_logger

# Importing the app module makes the configured Celery app current for shared tasks
import chatbot_studio.core.celery_app  # noqa: F401
from chatbot_studio.core.config import settings

logger = get_task_logger(__name__)


def build_message(to: str, subject: str, html: str) -> EmailMessage:
    """Build a multipart message with a plain-text fallback."""
    message = EmailMessage()
    message["From"] = settings.email_from
    message["To"] = to
    message["Subject"] = subject
    message.set_content("This message requires an HTML capable mail client.")
    message.add_alternative(html, subtype="html")
    return message


@shared_task(bind=True)
def send_email(self, to: str, subject: str, html: str) -> dict:
    """
    Send one email over SMTP.

    Delivery failures are logged and reported in the result, never raised.

    Args:
        to: Recipient address
        subject: Subject line
        html: HTML body

    Returns:
        Dict with ``sent`` flag
    """
    if not settings.email_enabled:
        logger.info(f"Email disabled, skipping '{subject}' to {to}")
        return {"sent": False, "reason": "disabled"}

    try:
        message = build_message(to, subject, html)
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=30) as smtp:
            if settings.smtp_use_tls:
                smtp.starttls()
            if settings.smtp_username:
                smtp.login(settings.smtp_username, settings.smtp_password or "")
            smtp.send_message(message)
    except Exception as e:
        logger.error(f"Failed to send email '{subject}' to {to}: {e}")
        return {"sent": False, "reason": str(e)}

    logger.info(f"Sent email '{subject}' to {to}")
    return {"sent": True}
