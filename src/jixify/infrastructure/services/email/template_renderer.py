"""Jinja2 template renderer for email templates.

Provides safe template rendering with HTML escaping and error handling.
"""

from jinja2 import TemplateSyntaxError, UndefinedError
from jinja2.sandbox import SandboxedEnvironment

from jixify.core.logging import get_logger

logger = get_logger(__name__)


class TemplateRenderer:
    """Jinja2 template renderer using a sandboxed environment.

    ``render`` autoescapes variables and is meant for HTML bodies;
    ``render_text`` leaves them as-is for subjects and plain-text bodies.
    """

    def __init__(self) -> None:
        self.env = SandboxedEnvironment(
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.text_env = SandboxedEnvironment(
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, template_string: str, variables: dict[str, str]) -> str:
        """Render an HTML template string with escaped variables.

        Raises:
            TemplateSyntaxError: If template syntax is invalid.
            UndefinedError: If a variable is used in an unsupported way.
        """
        return self._render(self.env, template_string, variables)

    def render_text(self, template_string: str, variables: dict[str, str]) -> str:
        """Render a plain-text template string without escaping."""
        return self._render(self.text_env, template_string, variables)

    def _render(
        self, env: SandboxedEnvironment, template_string: str, variables: dict[str, str]
    ) -> str:
        try:
            rendered = env.from_string(template_string).render(**variables)
            logger.debug("Template rendered successfully", variable_count=len(variables))
            return rendered
        except TemplateSyntaxError as e:
            logger.error("Template syntax error", error=str(e), line=e.lineno)
            raise
        except UndefinedError as e:
            logger.error("Undefined variable in template", error=str(e))
            raise


# Global template renderer instance
_template_renderer: TemplateRenderer | None = None


def get_template_renderer() -> TemplateRenderer:
    """Get the global template renderer instance."""
    global _template_renderer
    if _template_renderer is None:
        _template_renderer = TemplateRenderer()
    return _template_renderer
