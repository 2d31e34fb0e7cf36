"""OpenAI chat-completions provider."""

import openai
from openai import AsyncOpenAI

from jixify.core.config import Settings
from jixify.core.logging import get_logger
from jixify.domain.exceptions import CompletionError
from jixify.infrastructure.services.completion.completion_provider import CompletionProvider

logger = get_logger(__name__)


class OpenAICompletionProvider(CompletionProvider):
    """Completion provider backed by the OpenAI SDK."""

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str = "gpt-4o-mini",
        max_tokens: int = 2000,
        system_prompt: str = "You are an assistant.",
    ) -> None:
        self.client = client
        self.model = model
        self.max_tokens = max_tokens
        self.system_prompt = system_prompt

    @classmethod
    def from_settings(cls, settings: Settings) -> "OpenAICompletionProvider":
        try:
            client = AsyncOpenAI(api_key=settings.openai_api_key)
        except openai.OpenAIError as e:
            # Raised when no API key is configured
            logger.error("Completion provider not configured", error=str(e))
            raise CompletionError() from e
        return cls(
            client=client,
            model=settings.completion_model,
            max_tokens=settings.completion_max_tokens,
            system_prompt=settings.completion_system_prompt,
        )

    async def complete(self, message: str) -> str:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": self.system_prompt},
                    {"role": "user", "content": message},
                ],
                max_tokens=self.max_tokens,
            )
        except openai.OpenAIError as e:
            logger.error("Completion request failed", model=self.model, error=str(e))
            raise CompletionError() from e

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
