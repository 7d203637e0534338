"""Model sessions over the OpenAI chat completions API.

Any server speaking that API works: OpenAI itself, Azure OpenAI, vLLM,
LiteLLM, or Ollama's ``/v1`` compatibility endpoint via ``base_url``.
"""

import os
from collections.abc import AsyncIterator
from typing import Any

from openai import AsyncOpenAI

from agentcore.exceptions import LLMProviderError, ProviderConfigError
from agentcore.models.config import LLMConfig
from agentcore.providers.base import LLMProvider, Message
from agentcore.providers.factory import ProviderRegistry

# LLMConfig.max_tokens default; only sent when changed
DEFAULT_MAX_TOKENS = 4096

API_KEY_ENV_VAR = "OPENAI_API_KEY"


def _resolve_api_key(config: LLMConfig) -> str:
    if config.api_key:
        return config.api_key.get_secret_value()
    api_key = os.environ.get(API_KEY_ENV_VAR)
    if not api_key:
        msg = (
            "OpenAI API key not found. Set llm.api_key in the configuration "
            f"or the {API_KEY_ENV_VAR} environment variable."
        )
        raise ProviderConfigError(msg)
    return api_key


@ProviderRegistry.register("openai")
class OpenAICompatibleProvider(LLMProvider):
    """Streams chat completions from an OpenAI-compatible endpoint."""

    def __init__(self, config: LLMConfig) -> None:
        """Create the API client.

        Raises:
            ProviderConfigError: If neither the config nor the environment has an API key.
        """
        super().__init__(config)
        self._client = AsyncOpenAI(api_key=_resolve_api_key(config), base_url=config.base_url)

    def _convert_messages(self, messages: list[Message]) -> list[dict[str, Any]]:
        return [msg.model_dump() for msg in messages]

    def _build_request(self, messages: list[Message]) -> dict[str, Any]:
        request: dict[str, Any] = {
            "model": self._config.model,
            "messages": self._convert_messages(messages),
            "stream": True,
        }
        if self._config.temperature != 0.0:
            request["temperature"] = self._config.temperature
        if self._config.max_tokens != DEFAULT_MAX_TOKENS:
            request["max_tokens"] = self._config.max_tokens
        return request

    async def stream_chat(self, messages: list[Message]) -> AsyncIterator[str]:
        """Yield content deltas as the endpoint streams them.

        Raises:
            LLMProviderError: If the request fails or the stream breaks off.
        """
        try:
            stream = await self._client.chat.completions.create(**self._build_request(messages))
            async for chunk in stream:
                delta = chunk.choices[0].delta.content if chunk.choices else None
                if delta:
                    yield delta
        except Exception as e:
            msg = f"OpenAI API error: {e}"
            raise LLMProviderError(msg) from e
