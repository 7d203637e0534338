"""Tool capabilities and the router that dispatches them."""

from agentcore.tools.base import ToolDefinition, ToolExecutor, ToolSchema
from agentcore.tools.router import ToolRouter

__all__ = ["ToolDefinition", "ToolExecutor", "ToolRouter", "ToolSchema"]
