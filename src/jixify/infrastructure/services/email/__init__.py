"""Email providers and template rendering."""

from jixify.infrastructure.services.email.console_provider import ConsoleEmailProvider
from jixify.infrastructure.services.email.email_provider import EmailProvider
from jixify.infrastructure.services.email.smtp_provider import SMTPProvider, SMTPSettings
from jixify.infrastructure.services.email.template_renderer import (
    TemplateRenderer,
    get_template_renderer,
)

__all__ = [
    "ConsoleEmailProvider",
    "EmailProvider",
    "SMTPProvider",
    "SMTPSettings",
    "TemplateRenderer",
    "get_template_renderer",
]
