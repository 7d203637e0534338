"""Data models for agentcore."""

from agentcore.models.config import AgentLoopConfig, AutonomousConfig, LLMConfig
from agentcore.models.conversation import (
    AgentLoopResult,
    AgentState,
    AutonomousLoopResult,
    Message,
    Role,
    ToolCall,
    ToolResult,
)

__all__ = [
    "AgentLoopConfig",
    "AgentLoopResult",
    "AgentState",
    "AutonomousConfig",
    "AutonomousLoopResult",
    "LLMConfig",
    "Message",
    "Role",
    "ToolCall",
    "ToolResult",
]
