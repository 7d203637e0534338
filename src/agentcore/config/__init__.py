"""Configuration file support for agentcore."""

from agentcore.config.loader import (
    CLIOverrides,
    ConfigLoader,
    FileConfig,
    MCPServerConfig,
)

__all__ = [
    "CLIOverrides",
    "ConfigLoader",
    "FileConfig",
    "MCPServerConfig",
]
