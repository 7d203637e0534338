"""Model session providers."""

from agentcore.providers.base import LLMProvider, Message
from agentcore.providers.factory import ProviderRegistry, create_provider
from agentcore.providers.ollama import OllamaProvider
from agentcore.providers.openai_compat import OpenAICompatibleProvider

__all__ = [
    "LLMProvider",
    "Message",
    "OllamaProvider",
    "OpenAICompatibleProvider",
    "ProviderRegistry",
    "create_provider",
]
