"""Tool router.

Maps capability names to ``ToolDefinition``s and normalizes every dispatch,
successful or not, into a ``ToolResult`` envelope.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from agentcore.models.conversation import ToolResult
from agentcore.tools.base import ToolDefinition

logger = logging.getLogger(__name__)


class ToolRouter:
    """Single source of truth for the capabilities available to a session.

    Capabilities are injected at construction time or registered later.
    Registering a name again replaces the earlier capability.
    """

    def __init__(self, tools: Iterable[ToolDefinition] = ()) -> None:
        self._tools: dict[str, ToolDefinition] = {}
        for tool in tools:
            self.register(tool)

    def register(self, tool: ToolDefinition) -> None:
        """Insert or replace a capability by name."""
        self._tools[tool.name] = tool

    async def execute(self, name: str, arguments: dict[str, Any]) -> ToolResult:
        """Dispatch a named invocation.

        Never raises: an unknown name and a failing capability both come back
        as ``ToolResult(success=False)`` so the model can react to them.

        Args:
            name: Capability name.
            arguments: Argument mapping passed to the capability.

        Returns:
            Result envelope for the invocation.
        """
        tool = self._tools.get(name)
        if tool is None:
            logger.warning("Tool %r not found", name)
            return ToolResult.fail(f'Tool "{name}" not found')

        try:
            result = await tool.execute(arguments)
        except Exception as e:
            logger.info("Tool %r failed: %s", name, e)
            return ToolResult.fail(str(e) or type(e).__name__)

        return ToolResult.ok(result)

    def get(self, name: str) -> ToolDefinition | None:
        return self._tools.get(name)

    def has(self, *names: str) -> bool:
        """Whether every one of ``names`` is registered."""
        return all(name in self._tools for name in names)

    def list(self) -> list[ToolDefinition]:
        """Registered capabilities in registration order."""
        return list(self._tools.values())

    def list_schemas(self) -> list[dict[str, Any]]:
        """MCP-style advertisement of every registered capability."""
        return [tool.to_mcp_format() for tool in self._tools.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
