"""Ollama LLM provider.

Uses the ollama Python SDK for local inference or for Ollama's hosted models.
"""

from collections.abc import AsyncIterator
from typing import Any

import ollama

from agentcore.exceptions import LLMProviderError
from agentcore.models.config import LLMConfig
from agentcore.providers.base import LLMProvider, Message
from agentcore.providers.factory import ProviderRegistry

# Default max tokens value from LLMConfig
DEFAULT_MAX_TOKENS = 4096

# Default context size for Ollama (much larger than Ollama's default of 2048)
DEFAULT_CONTEXT_SIZE = 65536

OLLAMA_CLOUD_HOST = "https://ollama.com"


@ProviderRegistry.register("ollama", "ollama-local", "ollama-cloud")
class OllamaProvider(LLMProvider):
    """Ollama provider streaming chat completions."""

    def __init__(self, config: LLMConfig) -> None:
        """Initialize the Ollama provider.

        Args:
            config: LLM configuration with model, optional base_url and api_key.
                The ``ollama-cloud`` provider name defaults the host to ollama.com.
        """
        super().__init__(config)

        client_kwargs: dict[str, Any] = {}
        host = config.base_url
        if host is None and config.provider.lower() == "ollama-cloud":
            host = OLLAMA_CLOUD_HOST
        if host:
            client_kwargs["host"] = host
        if config.api_key:
            client_kwargs["headers"] = {
                "Authorization": f"Bearer {config.api_key.get_secret_value()}"
            }

        self._client = ollama.AsyncClient(**client_kwargs)

    def _convert_messages(self, messages: list[Message]) -> list[dict[str, Any]]:
        return [{"role": msg.role, "content": msg.content} for msg in messages]

    def _build_options(self) -> dict[str, Any]:
        """Translate the configuration into Ollama request options."""
        options: dict[str, Any] = {}
        if self._config.temperature != 0.0:
            options["temperature"] = self._config.temperature
        if self._config.max_tokens != DEFAULT_MAX_TOKENS:
            options["num_predict"] = self._config.max_tokens
        # Ollama defaults to a 2048 token window, too small for tool transcripts
        options["num_ctx"] = self._config.context_size or DEFAULT_CONTEXT_SIZE
        return options

    def _wrap_error(self, error: Exception) -> LLMProviderError:
        if isinstance(error, ollama.ResponseError) and "not found" in str(error).lower():
            msg = (
                f"Ollama model '{self._config.model}' not found. "
                f"Check that the model exists on the server "
                f"(run 'ollama list' or check /api/tags endpoint). "
                f"Original error: {error}"
            )
        else:
            msg = f"Ollama API error: {error}"
        return LLMProviderError(msg)

    async def stream_chat(self, messages: list[Message]) -> AsyncIterator[str]:
        """Stream response text from Ollama.

        Raises:
            LLMProviderError: If the request fails or the stream breaks off.
        """
        try:
            stream = await self._client.chat(
                model=self._config.model,
                messages=self._convert_messages(messages),
                options=self._build_options(),
                stream=True,
            )
            async for part in stream:
                content = part.message.content
                if content:
                    yield content
                if part.done:
                    return
        except Exception as e:
            raise self._wrap_error(e) from e
