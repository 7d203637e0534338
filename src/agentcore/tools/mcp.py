"""MCP server as a source of tool capabilities.

Lists the tools of an MCP server and wraps each one as a ``ToolDefinition``
whose ``execute`` calls the remote tool over a shared client session.
"""

from __future__ import annotations

import logging
import shlex
from collections.abc import AsyncIterator
from contextlib import AsyncExitStack, asynccontextmanager
from typing import TYPE_CHECKING, Any

from mcp import ClientSession
from mcp.client.sse import sse_client
from mcp.client.stdio import StdioServerParameters, stdio_client

from agentcore.exceptions import (
    AgentCoreError,
    ConfigurationError,
    MCPConnectionError,
    ToolExecutionError,
)
from agentcore.tools.base import ToolDefinition, ToolExecutor, ToolSchema

if TYPE_CHECKING:
    from mcp.types import CallToolResult

    from agentcore.config.loader import MCPServerConfig

logger = logging.getLogger(__name__)


@asynccontextmanager
async def open_session(config: MCPServerConfig) -> AsyncIterator[ClientSession]:
    """Open an initialized client session to the configured MCP server.

    Supports both stdio (command-based) and HTTP (SSE URL) connections.

    Raises:
        ConfigurationError: If neither a command nor a URL is configured.
    """
    if config.command and config.command.strip():
        parts = shlex.split(config.command)
        params = StdioServerParameters(command=parts[0], args=parts[1:])
        async with (
            stdio_client(params) as (read_stream, write_stream),
            ClientSession(read_stream, write_stream) as session,
        ):
            await session.initialize()
            yield session
    elif config.url and config.url.strip():
        async with (
            sse_client(config.url, headers=config.headers) as (read_stream, write_stream),
            ClientSession(read_stream, write_stream) as session,
        ):
            await session.initialize()
            yield session
    else:
        msg = "MCP server config needs either 'command' or 'url'"
        raise ConfigurationError(msg)


def unwrap_result(result: CallToolResult) -> Any:
    """Turn an MCP tool result into a plain value.

    Structured content wins over text blocks; text blocks are joined with
    newlines. Other block types are returned as dictionaries.

    Raises:
        ToolExecutionError: If the server flagged the result as an error.
    """
    texts: list[str] = []
    others: list[dict[str, Any]] = []
    for block in result.content:
        if getattr(block, "type", None) == "text":
            texts.append(block.text)
        else:
            others.append(block.model_dump(exclude_none=True))

    if result.isError:
        msg = "\n".join(texts) or "MCP tool reported an error"
        raise ToolExecutionError(msg)

    structured = getattr(result, "structuredContent", None)
    if structured is not None:
        return structured
    if others:
        return {"text": "\n".join(texts), "content": others}
    return "\n".join(texts)


def _make_executor(session: ClientSession, name: str) -> ToolExecutor:
    async def execute(arguments: dict[str, Any]) -> Any:
        result = await session.call_tool(name, arguments)
        return unwrap_result(result)

    return execute


async def load_mcp_tools(session: ClientSession) -> list[ToolDefinition]:
    """Discover the server's tools and wrap them as capabilities.

    The returned definitions call through ``session`` and are only usable
    while it stays open.
    """
    listing = await session.list_tools()
    tools = [
        ToolDefinition(
            name=tool.name,
            description=tool.description or "",
            schema=ToolSchema.model_validate(tool.inputSchema),
            execute=_make_executor(session, tool.name),
        )
        for tool in listing.tools
    ]
    logger.info("Loaded %d tool(s) from MCP server", len(tools))
    return tools


@asynccontextmanager
async def connect_mcp_tools(config: MCPServerConfig) -> AsyncIterator[list[ToolDefinition]]:
    """Connect to the MCP server once and yield its tools.

    Every call made through the yielded tools shares one session, so a
    stdio server keeps its process and state until the block exits.

    Raises:
        ConfigurationError: If neither a command nor a URL is configured.
        MCPConnectionError: If the server cannot be started, reached or listed.
    """
    async with AsyncExitStack() as stack:
        try:
            session = await stack.enter_async_context(open_session(config))
            tools = await load_mcp_tools(session)
        except AgentCoreError:
            raise
        except Exception as e:
            msg = f"Could not connect to MCP server: {e}"
            raise MCPConnectionError(msg) from e
        yield tools
