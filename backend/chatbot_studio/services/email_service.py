"""
Email dispatch and templates.

Mail is queued to the Celery ``email`` queue after the triggering
transaction commits. Queueing failures are logged and never surface to
the caller.
"""
import logging
from html import escape

from chatbot_studio.core.config import settings

logger = logging.getLogger(__name__)


def welcome_template(name: str) -> tuple[str, str]:
    """Return (subject, html) for the post-registration welcome email."""
    subject = "Welcome to Chatbot Studio"
    html = (
        f"<h1>Welcome, {escape(name)}!</h1>"
        "<p>Your account is ready. Create your first bot from the dashboard "
        "and publish it to start chatting with your visitors.</p>"
    )
    return subject, html


def bot_published_template(user_name: str, bot_name: str, bot_url: str) -> tuple[str, str]:
    """Return (subject, html) for the bot-published email."""
    subject = f"Your bot {bot_name} is live"
    html = (
        f"<h1>Hi {escape(user_name)},</h1>"
        f"<p>Your bot <strong>{escape(bot_name)}</strong> has been published "
        "and can now receive messages.</p>"
        f'<p><a href="{escape(bot_url, quote=True)}">Open bot</a></p>'
    )
    return subject, html


class EmailService:
    """Best-effort email dispatch."""

    @staticmethod
    def dispatch(to: str, subject: str, html: str) -> bool:
        """
        Queue an email for delivery.

        Returns:
            True if the task was queued
        """
        from chatbot_studio.workers.email_tasks import send_email

        try:
            send_email.delay(to, subject, html)
        except Exception as e:
            logger.warning(f"Failed to queue email '{subject}': {e}")
            return False
        return True

    @staticmethod
    def send_welcome(to: str, name: str) -> bool:
        subject, html = welcome_template(name)
        return EmailService.dispatch(to, subject, html)

    @staticmethod
    def send_bot_published(to: str, user_name: str, bot_id: str, bot_name: str) -> bool:
        bot_url = f"{settings.app_url.rstrip('/')}/bots/{bot_id}"
        subject, html = bot_published_template(user_name, bot_name, bot_url)
        return EmailService.dispatch(to, subject, html)
