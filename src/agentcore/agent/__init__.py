"""Single-session agent loop."""

from agentcore.agent.loop import AgentLoop
from agentcore.agent.parsing import DEFAULT_STRATEGIES, ParseStrategy, parse_tool_call

__all__ = ["DEFAULT_STRATEGIES", "AgentLoop", "ParseStrategy", "parse_tool_call"]
