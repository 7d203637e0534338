"""Abstract base class for LLM providers.

Defines the interface that all LLM provider implementations must follow.
Providers stream response chunks; the agent loop only ever consumes the
accumulated text.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from agentcore.models.config import LLMConfig
from agentcore.models.conversation import Message

__all__ = ["LLMProvider", "Message"]


class LLMProvider(ABC):
    """Abstract base class for all LLM providers."""

    def __init__(self, config: LLMConfig) -> None:
        """Initialize the provider with configuration."""
        self._config = config

    @abstractmethod
    def stream_chat(self, messages: list[Message]) -> AsyncIterator[str]:
        """Stream a chat completion for the conversation.

        Args:
            messages: Ordered conversation turns.

        Yields:
            Chunks of response text as they are produced.

        Raises:
            LLMProviderError: If the API call fails.
        """
        ...

    async def complete(self, messages: list[Message]) -> str:
        """Return the full response text for the conversation.

        Args:
            messages: Ordered conversation turns.

        Returns:
            All streamed chunks joined together.

        Raises:
            LLMProviderError: If the API call fails.
        """
        chunks: list[str] = []
        async for chunk in self.stream_chat(messages):
            chunks.append(chunk)
        return "".join(chunks)
