"""Tests for the Ollama provider."""

from collections.abc import AsyncIterator
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, patch

import ollama
import pytest
from pydantic import SecretStr

from agentcore.exceptions import LLMProviderError
from agentcore.models.config import LLMConfig
from agentcore.providers.base import Message
from agentcore.providers.factory import ProviderRegistry, create_provider
from agentcore.providers.ollama import OllamaProvider

MESSAGES = [Message(role="system", content="be brief"), Message(role="user", content="hi")]


async def _stream(items: list[Any]) -> AsyncIterator[Any]:
    for item in items:
        yield item


def _part(content: str, *, done: bool = False) -> SimpleNamespace:
    return SimpleNamespace(message=SimpleNamespace(content=content), done=done)


@pytest.fixture
def provider() -> OllamaProvider:
    config = LLMConfig(
        provider="ollama",
        model="test-model:latest",
        base_url="http://localhost:11434",
    )
    return OllamaProvider(config)


class TestRegistration:
    """Tests for provider names."""

    @pytest.mark.parametrize("name", ["ollama", "ollama-local", "ollama-cloud"])
    def test_names_registered(self, name: str) -> None:
        assert ProviderRegistry.get(name) is OllamaProvider

    def test_create_provider(self) -> None:
        provider = create_provider(LLMConfig(provider="ollama-local", model="llama3.2"))
        assert isinstance(provider, OllamaProvider)


class TestClientSetup:
    """Tests for client construction."""

    def test_cloud_defaults_host(self) -> None:
        with patch("ollama.AsyncClient") as client_class:
            OllamaProvider(
                LLMConfig(provider="ollama-cloud", model="gpt-oss:120b", api_key=SecretStr("k"))
            )

        client_class.assert_called_once_with(
            host="https://ollama.com", headers={"Authorization": "Bearer k"}
        )

    def test_base_url_wins_for_cloud(self) -> None:
        with patch("ollama.AsyncClient") as client_class:
            OllamaProvider(
                LLMConfig(provider="ollama-cloud", model="m", base_url="https://proxy.local")
            )

        client_class.assert_called_once_with(host="https://proxy.local")

    def test_local_without_host_uses_client_default(self) -> None:
        with patch("ollama.AsyncClient") as client_class:
            OllamaProvider(LLMConfig(provider="ollama", model="llama3.2"))

        client_class.assert_called_once_with()


class TestStreaming:
    """Tests for streamed chat."""

    @pytest.mark.asyncio
    async def test_complete_joins_chunks(self, provider: OllamaProvider) -> None:
        provider._client = AsyncMock()
        provider._client.chat = AsyncMock(
            return_value=_stream([_part("Hel"), _part("lo"), _part("", done=True)])
        )

        assert await provider.complete(MESSAGES) == "Hello"

    @pytest.mark.asyncio
    async def test_stops_at_done(self, provider: OllamaProvider) -> None:
        provider._client = AsyncMock()
        provider._client.chat = AsyncMock(
            return_value=_stream([_part("a", done=True), _part("ignored")])
        )

        chunks = [chunk async for chunk in provider.stream_chat(MESSAGES)]

        assert chunks == ["a"]

    @pytest.mark.asyncio
    async def test_request_arguments(self, provider: OllamaProvider) -> None:
        provider._client = AsyncMock()
        provider._client.chat = AsyncMock(return_value=_stream([_part("x", done=True)]))

        await provider.complete(MESSAGES)

        provider._client.chat.assert_awaited_once_with(
            model="test-model:latest",
            messages=[
                {"role": "system", "content": "be brief"},
                {"role": "user", "content": "hi"},
            ],
            options={"num_ctx": 65536},
            stream=True,
        )

    def test_options_from_config(self) -> None:
        provider = OllamaProvider(
            LLMConfig(
                provider="ollama",
                model="m",
                temperature=0.7,
                max_tokens=512,
                context_size=8192,
            )
        )

        assert provider._build_options() == {
            "temperature": 0.7,
            "num_predict": 512,
            "num_ctx": 8192,
        }


class TestErrorHandling:
    """Tests for Ollama provider error messages."""

    @pytest.mark.asyncio
    async def test_model_not_found_error_message(self, provider: OllamaProvider) -> None:
        provider._client = AsyncMock()
        provider._client.chat = AsyncMock(
            side_effect=ollama.ResponseError("model 'test-model:latest' not found")
        )

        with pytest.raises(LLMProviderError) as exc_info:
            await provider.complete(MESSAGES)

        error_msg = str(exc_info.value)
        assert "test-model:latest" in error_msg
        assert "ollama list" in error_msg
        assert "/api/tags" in error_msg

    @pytest.mark.asyncio
    async def test_other_errors_wrapped(self, provider: OllamaProvider) -> None:
        provider._client = AsyncMock()
        provider._client.chat = AsyncMock(side_effect=ConnectionError("connection refused"))

        with pytest.raises(LLMProviderError) as exc_info:
            await provider.complete(MESSAGES)

        assert "Ollama API error" in str(exc_info.value)
        assert "connection refused" in str(exc_info.value)
