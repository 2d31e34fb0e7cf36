"""Console email provider for development.

Writes messages to the log instead of sending them.
"""

from jixify.core.logging import get_logger
from jixify.infrastructure.services.email.email_provider import EmailProvider

logger = get_logger(__name__)


class ConsoleEmailProvider(EmailProvider):
    """Logs outgoing emails; always reports success."""

    async def send_email(
        self,
        to: str,
        subject: str,
        html_body: str,
        text_body: str,
        from_email: str,
        from_name: str,
        reply_to: str | None = None,
    ) -> bool:
        logger.info(
            "[EMAIL] Console delivery",
            to=to,
            sender=f"{from_name} <{from_email}>",
            subject=subject,
            body=text_body,
        )
        return True
