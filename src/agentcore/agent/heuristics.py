"""Heuristics that keep the model acting instead of narrating.

These are best-effort pattern matches on natural language. They produce
false positives (a final answer phrased as "I'll ... next time") and false
negatives (intent phrased in ways the patterns miss); the round budget is the
only hard backstop.
"""

import re
from collections.abc import Iterable

from agentcore.models.conversation import ToolCall

ACTION_VERBS = (
    "add",
    "build",
    "change",
    "create",
    "delete",
    "deploy",
    "edit",
    "execute",
    "fix",
    "generate",
    "install",
    "make",
    "modify",
    "move",
    "refactor",
    "remove",
    "rename",
    "run",
    "set up",
    "start",
    "stop",
    "update",
    "write",
)

_VERB_ALTERNATION = "|".join(re.escape(verb) for verb in ACTION_VERBS)

# The user asks for something to be done
ACTION_REQUEST_PATTERN = re.compile(rf"\b(?:{_VERB_ALTERNATION})\b", re.IGNORECASE)

# The model announces what it is about to do: "I'll create", "Let me delete", ...
ACTION_INTENT_PATTERN = re.compile(
    r"\b(?:i\s+will|i['’]ll|i\s+am\s+going\s+to|i['’]m\s+going\s+to|i\s+need\s+to|"
    r"i\s+would|i['’]d|let\s+me|let['’]s|we\s+will|we['’]ll|next,?\s+i|now,?\s+i|"
    r"first,?\s+i|i\s+can|i\s+should)\s+(?:\w+\s+){0,3}?"
    rf"(?:{_VERB_ALTERNATION})\b",
    re.IGNORECASE,
)

# Tool names that only gather information
INFORMATION_TOOL_PATTERN = re.compile(
    r"(?:^|[._])(?:read|list|get|search|find|detect|show|status|logs|diff|inspect|"
    r"screenshot|console_logs|network_requests)(?:[._]|$)",
    re.IGNORECASE,
)


def requests_action(user_message: str) -> bool:
    """Whether the user's request contains an action verb."""
    return ACTION_REQUEST_PATTERN.search(user_message) is not None


def describes_action(text: str) -> bool:
    """Whether the text announces an action instead of performing it."""
    return ACTION_INTENT_PATTERN.search(text) is not None


def is_information_tool(name: str, extra: Iterable[str] = ()) -> bool:
    """Whether a tool only gathers information.

    Args:
        name: Tool name, e.g. ``read_file`` or ``git.status``.
        extra: Additional names configured as read-only.
    """
    if name in set(extra):
        return True
    return INFORMATION_TOOL_PATTERN.search(name) is not None


def has_executed_action(tool_calls: Iterable[ToolCall], extra: Iterable[str] = ()) -> bool:
    """Whether any dispatched call was an action rather than a lookup."""
    read_only = set(extra)
    return any(not is_information_tool(call.name, read_only) for call in tool_calls)


def is_too_terse(text: str, min_length: int) -> bool:
    return len(text.strip()) < min_length
