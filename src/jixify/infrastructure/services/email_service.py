"""Email service for sending verification links.

Renders the verification message and hands it to the configured provider in
a single attempt. Failures are reported to the caller as ``DeliveryError``.
"""

from jixify.core.config import Settings
from jixify.core.logging import get_logger
from jixify.domain.exceptions import DeliveryError
from jixify.domain.ports import Notifier
from jixify.infrastructure.services.email.console_provider import ConsoleEmailProvider
from jixify.infrastructure.services.email.email_provider import EmailProvider
from jixify.infrastructure.services.email.smtp_provider import SMTPProvider, SMTPSettings
from jixify.infrastructure.services.email.template_renderer import (
    TemplateRenderer,
    get_template_renderer,
)

logger = get_logger(__name__)

VERIFICATION_SUBJECT = "Verify your email"

VERIFICATION_HTML = """\
<p>Hi {{ username }},</p>
<p>Click to verify your email: <a href="{{ verification_url }}">{{ verification_url }}</a></p>
"""

VERIFICATION_TEXT = """\
Hi {{ username }},

Open this link to verify your email:
{{ verification_url }}
"""


def build_email_provider(settings: Settings) -> EmailProvider:
    """Create the email provider selected by ``settings.email_provider``."""
    if settings.email_provider == "smtp":
        return SMTPProvider(SMTPSettings.from_settings(settings))
    return ConsoleEmailProvider()


class EmailService(Notifier):
    """Sends verification emails through an ``EmailProvider``."""

    def __init__(
        self,
        provider: EmailProvider,
        from_email: str,
        from_name: str,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        """Initialize the email service.

        Args:
            provider: Transport used to deliver messages.
            from_email: Sender address.
            from_name: Sender display name.
            renderer: Template renderer; defaults to the shared instance.
        """
        self.provider = provider
        self.from_email = from_email
        self.from_name = from_name
        self.renderer = renderer or get_template_renderer()

    @classmethod
    def from_settings(cls, settings: Settings) -> "EmailService":
        return cls(
            provider=build_email_provider(settings),
            from_email=settings.mail_from_email,
            from_name=settings.mail_from_name,
        )

    async def send_verification_email(
        self, to_address: str, link: str, username: str | None = None
    ) -> None:
        """Deliver a verification link to ``to_address``.

        Raises:
            DeliveryError: If the provider raised or reported failure.
        """
        variables = {"username": username or "", "verification_url": link}
        html_body = self.renderer.render(VERIFICATION_HTML, variables)
        text_body = self.renderer.render_text(VERIFICATION_TEXT, variables)

        try:
            sent = await self.provider.send_email(
                to=to_address,
                subject=VERIFICATION_SUBJECT,
                html_body=html_body,
                text_body=text_body,
                from_email=self.from_email,
                from_name=self.from_name,
            )
        except Exception as e:
            logger.error(
                "Verification email delivery failed",
                provider=type(self.provider).__name__,
                error=str(e),
            )
            raise DeliveryError() from e

        if not sent:
            logger.error(
                "Verification email rejected by provider",
                provider=type(self.provider).__name__,
            )
            raise DeliveryError()

        logger.info("Verification email sent", provider=type(self.provider).__name__)
