"""Provider registry and factory.

Providers register themselves under one or more names with a class decorator;
``create_provider`` turns an ``LLMConfig`` into a ready model session.
"""

from collections.abc import Callable
from typing import ClassVar

from agentcore.exceptions import ProviderConfigError, ProviderNotFoundError
from agentcore.models.config import LLMConfig
from agentcore.providers.base import LLMProvider


class ProviderRegistry:
    """Registry of available LLM providers, keyed by lower-cased name."""

    _providers: ClassVar[dict[str, type[LLMProvider]]] = {}

    @classmethod
    def register(cls, *names: str) -> Callable[[type[LLMProvider]], type[LLMProvider]]:
        """Decorator registering a provider class under every given name.

        Example:
            @ProviderRegistry.register("ollama", "ollama-local")
            class OllamaProvider(LLMProvider):
                ...
        """

        def decorator(provider_class: type[LLMProvider]) -> type[LLMProvider]:
            for name in names:
                cls._providers[name.lower()] = provider_class
            return provider_class

        return decorator

    @classmethod
    def get(cls, name: str) -> type[LLMProvider]:
        """Look up a provider class.

        Raises:
            ProviderNotFoundError: If nothing is registered under ``name``.
        """
        try:
            return cls._providers[name.lower()]
        except KeyError:
            available = ", ".join(cls.list_providers()) or "none"
            msg = f"Provider '{name}' not found. Available: {available}"
            raise ProviderNotFoundError(msg) from None

    @classmethod
    def list_providers(cls) -> list[str]:
        """Sorted list of every registered name, aliases included."""
        return sorted(cls._providers)

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name.lower() in cls._providers


def create_provider(config: LLMConfig) -> LLMProvider:
    """Instantiate the provider named by ``config.provider``.

    Raises:
        ProviderNotFoundError: If the provider is not registered.
        ProviderConfigError: If the provider rejects the configuration.
    """
    provider_class = ProviderRegistry.get(config.provider)
    try:
        return provider_class(config)
    except ProviderConfigError:
        raise
    except Exception as e:
        msg = f"Failed to create provider '{config.provider}': {e}"
        raise ProviderConfigError(msg) from e
