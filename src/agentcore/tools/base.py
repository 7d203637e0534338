"""Tool capability definitions.

A capability is a named operation with a declared input schema and an async
``execute`` function. The loops treat capabilities as opaque: whatever the
function returns becomes the result, whatever it raises becomes an error.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, Field

ToolExecutor = Callable[[dict[str, Any]], Awaitable[Any]]


class ToolSchema(BaseModel):
    """JSON-schema style description of a tool's parameters."""

    type: Literal["object"] = "object"
    properties: dict[str, Any] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)


@dataclass
class ToolDefinition:
    """A named capability the agent can invoke."""

    name: str
    description: str
    execute: ToolExecutor
    schema: ToolSchema = field(default_factory=ToolSchema)

    def to_mcp_format(self) -> dict[str, Any]:
        """Describe the tool the way MCP ``tools/list`` does."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.schema.model_dump(),
        }

    def to_openai_format(self) -> dict[str, Any]:
        """Describe the tool as an OpenAI function definition."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.schema.model_dump(),
            },
        }
