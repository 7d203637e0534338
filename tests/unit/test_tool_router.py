"""Tests for the tool router and tool definitions."""

import json
from typing import Any

import pytest

from agentcore.models.conversation import ToolResult
from agentcore.tools.base import ToolDefinition, ToolSchema
from agentcore.tools.router import ToolRouter


async def _echo(arguments: dict[str, Any]) -> dict[str, Any]:
    return {"echo": arguments}


async def _explode(arguments: dict[str, Any]) -> None:
    msg = f"cannot handle {arguments.get('path')}"
    raise RuntimeError(msg)


async def _explode_silently(arguments: dict[str, Any]) -> None:
    raise KeyError


def _tool(name: str, execute: Any = _echo, **schema: Any) -> ToolDefinition:
    return ToolDefinition(
        name=name,
        description=f"{name} description",
        execute=execute,
        schema=ToolSchema(**schema),
    )


class TestExecute:
    """Tests for dispatching invocations."""

    @pytest.mark.asyncio
    async def test_success_wraps_result(self) -> None:
        """A returning tool produces a successful envelope."""
        router = ToolRouter([_tool("echo")])

        result = await router.execute("echo", {"x": 1})

        assert result == ToolResult(success=True, result={"echo": {"x": 1}})
        assert result.error is None

    @pytest.mark.asyncio
    async def test_unknown_tool_is_failure_not_exception(self) -> None:
        """An unregistered name comes back as a failed envelope."""
        router = ToolRouter()

        result = await router.execute("missing", {})

        assert result.success is False
        assert result.error == 'Tool "missing" not found'

    @pytest.mark.asyncio
    async def test_raising_tool_is_failure(self) -> None:
        """Exceptions from a tool are captured with their message."""
        router = ToolRouter([_tool("boom", _explode)])

        result = await router.execute("boom", {"path": "a.txt"})

        assert result.success is False
        assert result.error == "cannot handle a.txt"
        assert result.result is None

    @pytest.mark.asyncio
    async def test_exception_without_message_uses_type_name(self) -> None:
        """An exception with an empty message still yields an error string."""
        router = ToolRouter([_tool("boom", _explode_silently)])

        result = await router.execute("boom", {})

        assert result.error == "KeyError"

    @pytest.mark.asyncio
    async def test_none_result_is_success(self) -> None:
        """A tool returning nothing still succeeded."""

        async def noop(arguments: dict[str, Any]) -> None:
            return None

        router = ToolRouter([_tool("noop", noop)])

        result = await router.execute("noop", {})

        assert result.success is True
        assert result.result is None


class TestRegistry:
    """Tests for registration and lookup."""

    def test_register_replaces_by_name(self) -> None:
        """Registering a name again replaces the earlier capability."""
        first = _tool("dup")
        second = _tool("dup", _explode)
        router = ToolRouter([first])

        router.register(second)

        assert router.get("dup") is second
        assert len(router) == 1

    def test_has_requires_every_name(self) -> None:
        """has() is true only when all names are registered."""
        router = ToolRouter([_tool("a"), _tool("b")])

        assert router.has("a", "b")
        assert not router.has("a", "c")
        assert router.has()

    def test_contains_and_get(self) -> None:
        """Membership and lookup by name."""
        router = ToolRouter([_tool("a")])

        assert "a" in router
        assert "b" not in router
        assert router.get("b") is None

    def test_list_keeps_registration_order(self) -> None:
        """Capabilities are listed in the order they were registered."""
        router = ToolRouter([_tool("b"), _tool("a")])
        router.register(_tool("c"))

        assert [tool.name for tool in router.list()] == ["b", "a", "c"]

    def test_list_schemas_mcp_format(self) -> None:
        """Schemas advertise name, description and input schema."""
        router = ToolRouter(
            [_tool("write_file", properties={"path": {"type": "string"}}, required=["path"])]
        )

        assert router.list_schemas() == [
            {
                "name": "write_file",
                "description": "write_file description",
                "inputSchema": {
                    "type": "object",
                    "properties": {"path": {"type": "string"}},
                    "required": ["path"],
                },
            }
        ]


class TestToolDefinition:
    """Tests for tool definition formats."""

    def test_default_schema_is_empty_object(self) -> None:
        """A tool without declared parameters accepts an empty object."""
        tool = ToolDefinition(name="ping", description="Ping", execute=_echo)

        assert tool.to_mcp_format()["inputSchema"] == {
            "type": "object",
            "properties": {},
            "required": [],
        }

    def test_openai_format(self) -> None:
        """OpenAI function definitions wrap the same schema."""
        tool = _tool("echo", properties={"x": {"type": "integer"}})

        formatted = tool.to_openai_format()

        assert formatted["type"] == "function"
        assert formatted["function"]["name"] == "echo"
        assert formatted["function"]["parameters"]["properties"] == {"x": {"type": "integer"}}


class TestToolResultPrompt:
    """Tests for serializing envelopes for the model."""

    def test_failure_carries_error(self) -> None:
        assert json.loads(ToolResult.fail("boom").to_prompt()) == {
            "success": False,
            "error": "boom",
        }

    def test_circular_result_falls_back_to_repr(self) -> None:
        looped: list[Any] = []
        looped.append(looped)

        payload = json.loads(ToolResult.ok(looped).to_prompt())

        assert payload == {"success": True, "result": "[[...]]"}
