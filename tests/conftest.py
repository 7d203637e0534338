"""Shared fixtures: a scripted model session and in-memory tools."""

from collections.abc import AsyncIterator, Callable
from typing import Any

import pytest

from agentcore.models.config import LLMConfig
from agentcore.models.conversation import Message
from agentcore.providers.base import LLMProvider
from agentcore.tools.base import ToolDefinition, ToolSchema


class ScriptedProvider(LLMProvider):
    """Provider replaying canned responses in order.

    An ``Exception`` in the script is raised instead of answered. Once the
    script runs out the last entry repeats.
    """

    def __init__(self, responses: list[str | Exception]) -> None:
        super().__init__(LLMConfig(provider="scripted", model="test-model"))
        self._responses = list(responses)
        self.calls: list[list[Message]] = []

    async def stream_chat(self, messages: list[Message]) -> AsyncIterator[str]:
        self.calls.append(list(messages))
        index = min(len(self.calls), len(self._responses)) - 1
        response = self._responses[index]
        if isinstance(response, Exception):
            raise response
        # Split to exercise chunk accumulation
        middle = len(response) // 2
        for chunk in (response[:middle], response[middle:]):
            if chunk:
                yield chunk


class RecordingTool:
    """Tool function remembering the arguments of every call."""

    def __init__(self, result: Any = None, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def __call__(self, arguments: dict[str, Any]) -> Any:
        self.calls.append(arguments)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def scripted() -> Callable[..., ScriptedProvider]:
    """Factory for scripted providers: ``scripted("first", "second")``."""

    def factory(*responses: str | Exception) -> ScriptedProvider:
        return ScriptedProvider(list(responses))

    return factory


@pytest.fixture
def make_tool() -> Callable[..., tuple[ToolDefinition, RecordingTool]]:
    """Factory for a tool definition backed by a ``RecordingTool``."""

    def factory(
        name: str,
        result: Any = None,
        *,
        error: Exception | None = None,
        properties: dict[str, Any] | None = None,
        description: str = "",
    ) -> tuple[ToolDefinition, RecordingTool]:
        recorder = RecordingTool(result, error)
        definition = ToolDefinition(
            name=name,
            description=description or f"The {name} tool",
            execute=recorder,
            schema=ToolSchema(
                properties=properties or {},
                required=list(properties or {}),
            ),
        )
        return definition, recorder

    return factory
