"""Abstract base class for completion providers."""

from abc import ABC, abstractmethod


class CompletionProvider(ABC):
    """Produces a single reply for a user message."""

    @abstractmethod
    async def complete(self, message: str) -> str:
        """Return the model's reply to ``message``.

        Raises:
            CompletionError: If the upstream provider fails.
        """
        pass
