"""Prompt templates for the agent loop.

The system prompt fixes the tool-call syntax; the corrective prompts are
injected as ``system`` turns when a response needs another round.
"""

import json
from typing import Any

from agentcore.models.conversation import ToolCall, ToolResult

AGENT_SYSTEM_PROMPT = """\
You are an autonomous software engineering agent. You complete the user's request
by calling tools, one call per response, until the work is actually done.

## Tool Usage
- To use a tool, respond with ONLY a JSON object: {{"tool": "tool_name", "args": {{...}}}}
- You can also use a markdown code block:
```json
{{"tool": "tool_name", "args": {{...}}}}
```
- "args" is always an object, even when a tool takes no arguments: {{}}
- After each call you receive the result as a system message starting with "Tool result".
- If a tool fails, read the error and decide how to recover.

## Rules
1. When the user asks you to change something, DO it with a tool call. Never describe
   what you are going to do instead of doing it.
2. Gather information with read-only tools before modifying files you have not seen.
3. When the task is complete, reply with a short plain-text summary of what you did.
   Do not include a tool call in that final summary.

## Available Tools
{tool_list}
"""

NO_TOOLS_AVAILABLE = "(no tools are available in this session)"

EMPTY_RESPONSE_CORRECTION = (
    "Your last response was empty. Either call a tool using the JSON format "
    '{"tool": "tool_name", "args": {...}} or reply with a message saying the task is complete.'
)

DESCRIBE_INSTEAD_OF_ACT_CORRECTION = (
    "You described an action but did not perform it. Do not explain what you will do. "
    "Execute it now by responding with a tool call: "
    '{"tool": "tool_name", "args": {...}}'
)

SUMMARY_REQUEST = (
    "The tool calls have run. Reply with a short summary for the user describing "
    "what was done and the result."
)


def _format_parameters(schema: dict[str, Any]) -> str:
    properties: dict[str, Any] = schema.get("properties") or {}
    required = set(schema.get("required") or [])
    params = []
    for name, prop in properties.items():
        kind = prop.get("type", "any") if isinstance(prop, dict) else "any"
        marker = "" if name in required else "?"
        params.append(f"{name}{marker}: {kind}")
    return ", ".join(params)


def format_tool_list(tool_schemas: list[dict[str, Any]]) -> str:
    """Render MCP-style tool descriptions as a bullet list."""
    if not tool_schemas:
        return NO_TOOLS_AVAILABLE
    lines = []
    for tool in tool_schemas:
        params = _format_parameters(tool.get("inputSchema") or {})
        lines.append(f"- {tool['name']}({params}): {tool.get('description', '')}")
    return "\n".join(lines)


def build_system_prompt(tool_schemas: list[dict[str, Any]]) -> str:
    """Build the system prompt advertising the available tools."""
    return AGENT_SYSTEM_PROMPT.format(tool_list=format_tool_list(tool_schemas))


def format_tool_use(call: ToolCall) -> str:
    return f"Using tool: {call.name}"


def format_tool_result(call: ToolCall, result: ToolResult) -> str:
    """Format a tool result envelope for the model."""
    return f"Tool result ({call.name}): {result.to_prompt()}"


def format_arguments(arguments: dict[str, Any]) -> str:
    return json.dumps(arguments, default=str)
