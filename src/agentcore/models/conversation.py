"""Conversation data models.

Defines the structure for conversation turns, tool calls, tool results and
the outcomes returned by the agent and autonomous loops.
"""

import json
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["system", "user", "assistant"]


class Message(BaseModel):
    """Single turn in a conversation.

    The ``system`` role carries both the fixed instructions and the tool
    results or corrections injected back into the conversation.
    """

    role: Role
    content: str


class ToolCall(BaseModel):
    """Tool invocation parsed from model output."""

    model_config = ConfigDict(frozen=True)

    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class ToolResult(BaseModel):
    """Uniform envelope around a tool execution.

    ``result`` is meaningful only when ``success`` is true, ``error`` only
    when it is false.
    """

    success: bool
    result: Any = None
    error: str | None = None

    @classmethod
    def ok(cls, result: Any) -> "ToolResult":
        """Wrap a value produced by a tool."""
        return cls(success=True, result=result)

    @classmethod
    def fail(cls, error: str) -> "ToolResult":
        """Wrap a failure message."""
        return cls(success=False, error=error)

    def to_prompt(self) -> str:
        """Serialize the envelope as JSON for the model to read."""
        payload: dict[str, Any] = {"success": self.success}
        if self.success:
            payload["result"] = self.result
        else:
            payload["error"] = self.error
        try:
            return json.dumps(payload, default=str)
        except (TypeError, ValueError):
            # non-str keys or cycles
            payload["result"] = repr(self.result)
            return json.dumps(payload)


class AgentState(BaseModel):
    """Mutable state of one agent loop run."""

    messages: list[Message] = Field(default_factory=list)
    tool_calls: list[ToolCall] = Field(default_factory=list)
    tool_results: list[ToolResult] = Field(default_factory=list)
    iteration: int = 0
    max_iterations: int


class AgentLoopResult(BaseModel):
    """Result of a completed agent loop run."""

    final_message: str
    tool_calls: list[ToolCall] = Field(default_factory=list)
    iterations: int


class AutonomousLoopResult(BaseModel):
    """Outcome of an autonomous loop run."""

    success: bool
    iterations: int
    final_message: str
    tool_calls: list[ToolCall] = Field(default_factory=list)
