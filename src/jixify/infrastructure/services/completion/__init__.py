"""Completion providers for the authenticated chat proxy."""

from jixify.infrastructure.services.completion.completion_provider import CompletionProvider
from jixify.infrastructure.services.completion.openai_provider import OpenAICompletionProvider

__all__ = ["CompletionProvider", "OpenAICompletionProvider"]
