"""Tool call extraction from model text.

Models are asked to answer with ``{"tool": "<name>", "args": {...}}``. They
wrap that object in different ways, so extraction is an ordered list of
strategies, each returning a ``ToolCall`` or ``None``. The first strategy that
finds a well-formed call wins; text nothing matches is a plain answer.
"""

import json
import re
from collections.abc import Callable, Sequence
from typing import Any

from agentcore.models.conversation import ToolCall

ParseStrategy = Callable[[str], ToolCall | None]

JSON_FENCE_PATTERN = re.compile(r"```json[ \t]*\n(.*?)```", re.DOTALL | re.IGNORECASE)
GENERIC_FENCE_PATTERN = re.compile(r"```[\w+-]*[ \t]*\n(.*?)```", re.DOTALL)
TOOL_KEY_PATTERN = re.compile(r'"tool"\s*:')

# How far back from a "tool" key to look for the opening brace
_BRACE_LOOKBACK = 400

_decoder = json.JSONDecoder()


def to_tool_call(obj: Any) -> ToolCall | None:
    """Validate a decoded JSON value as a tool call.

    A call needs a non-empty string ``tool`` and an object ``args``.
    """
    if not isinstance(obj, dict):
        return None
    name = obj.get("tool")
    args = obj.get("args")
    if not isinstance(name, str) or not name.strip() or not isinstance(args, dict):
        return None
    return ToolCall(name=name.strip(), arguments=args)


def _loads(candidate: str) -> ToolCall | None:
    try:
        return to_tool_call(json.loads(candidate))
    except json.JSONDecodeError:
        return None


def parse_bare_json(text: str) -> ToolCall | None:
    """The whole response is the JSON object."""
    return _loads(text.strip())


def parse_json_fence(text: str) -> ToolCall | None:
    """A fenced block tagged ``json``."""
    for match in JSON_FENCE_PATTERN.finditer(text):
        call = _loads(match.group(1).strip())
        if call is not None:
            return call
    return None


def parse_generic_fence(text: str) -> ToolCall | None:
    """Any fenced block, tagged or not."""
    for match in GENERIC_FENCE_PATTERN.finditer(text):
        call = _loads(match.group(1).strip())
        if call is not None:
            return call
    return None


def parse_embedded_json(text: str) -> ToolCall | None:
    """A JSON object somewhere inside surrounding prose.

    Each ``"tool":`` key is traced back to the braces before it; the nearest
    brace that decodes into a valid call is used.
    """
    for match in TOOL_KEY_PATTERN.finditer(text):
        window_start = max(0, match.start() - _BRACE_LOOKBACK)
        position = match.start()
        while True:
            position = text.rfind("{", window_start, position)
            if position == -1:
                break
            try:
                obj, _ = _decoder.raw_decode(text, position)
            except json.JSONDecodeError:
                continue
            call = to_tool_call(obj)
            if call is not None:
                return call
    return None


DEFAULT_STRATEGIES: tuple[ParseStrategy, ...] = (
    parse_bare_json,
    parse_json_fence,
    parse_generic_fence,
    parse_embedded_json,
)


def parse_tool_call(
    text: str,
    strategies: Sequence[ParseStrategy] = DEFAULT_STRATEGIES,
) -> ToolCall | None:
    """Extract the first tool call found by ``strategies``, tried in order."""
    for strategy in strategies:
        call = strategy(text)
        if call is not None:
            return call
    return None
