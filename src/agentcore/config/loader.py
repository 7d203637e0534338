"""agentcore.yaml support.

A project directory may carry an ``agentcore.yaml`` describing the model
session, the loop budgets and an MCP server offering tools. Values can refer
to the environment, and command line flags win over anything in the file.
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, SecretStr, ValidationError

from agentcore.exceptions import ConfigurationError
from agentcore.models.config import AgentLoopConfig, AutonomousConfig, LLMConfig

# ${NAME} or ${NAME:-fallback}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:-]+)(?::-([^}]*))?\}")

# Searched in the working directory, first match wins
CONFIG_FILE_NAMES = ["agentcore.yaml", ".agentcore.yaml", "agentcore.yml", ".agentcore.yml"]

DEFAULT_PROVIDER = "ollama"
DEFAULT_MODEL = "llama3.2"


class MCPServerConfig(BaseModel):
    """Where the tool capabilities come from.

    Either ``command`` launches a server speaking MCP over stdio
    (``npx -y @example/fs-server /workspace``), or ``url`` points at a
    running server's SSE endpoint, optionally with auth ``headers``.
    """

    command: str | None = None
    url: str | None = None
    headers: dict[str, str] | None = None


class CLIOverrides(BaseModel):
    """Model session flags given on the command line; unset fields are ignored."""

    provider: str | None = None
    model: str | None = None
    base_url: str | None = None
    api_key: str | None = None
    temperature: float | None = None
    max_tokens: int | None = None


class FileConfig(BaseModel):
    """Top-level layout of agentcore.yaml."""

    llm: LLMConfig | None = None
    agent: AgentLoopConfig = Field(default_factory=AgentLoopConfig)
    autonomous: AutonomousConfig = Field(default_factory=AutonomousConfig)
    mcp_server: MCPServerConfig | None = None


def _expand(text: str) -> str:
    def lookup(match: re.Match[str]) -> str:
        name, fallback = match.group(1), match.group(2)
        value = os.environ.get(name, fallback)
        if value is None:
            msg = f"Environment variable {name} is not set"
            raise ConfigurationError(msg)
        return value

    return ENV_VAR_PATTERN.sub(lookup, text)


class ConfigLoader:
    """Find, read and merge agentcore configuration."""

    @staticmethod
    def discover_config_file(explicit_path: Path | None = None) -> Path | None:
        """Locate the configuration file.

        An explicit path must exist. Without one, the working directory is
        searched for the names in ``CONFIG_FILE_NAMES``; finding nothing is
        not an error.

        Raises:
            ConfigurationError: If ``explicit_path`` does not exist.
        """
        if explicit_path is None:
            candidates = (Path.cwd() / name for name in CONFIG_FILE_NAMES)
            return next((path for path in candidates if path.exists()), None)

        if not explicit_path.exists():
            msg = f"Configuration file not found: {explicit_path}"
            raise ConfigurationError(msg)
        return explicit_path

    @staticmethod
    def load_yaml(path: Path) -> dict[str, Any]:
        """Parse a YAML file into a mapping; an empty file gives ``{}``.

        Raises:
            ConfigurationError: If the file is unreadable, not YAML, or not a mapping.
        """
        try:
            content = yaml.safe_load(path.read_text())
        except OSError as e:
            msg = f"Failed to read configuration file {path}: {e}"
            raise ConfigurationError(msg) from e
        except yaml.YAMLError as e:
            msg = f"Failed to parse configuration file {path}: {e}"
            raise ConfigurationError(msg) from e

        if content is None:
            return {}
        if not isinstance(content, dict):
            msg = f"Configuration file {path} must contain a mapping"
            raise ConfigurationError(msg)
        return content

    @staticmethod
    def interpolate_env_vars(value: Any) -> Any:
        """Substitute ``${NAME}`` and ``${NAME:-fallback}`` in every string of ``value``.

        Mappings and lists are walked recursively; other values are returned
        untouched.

        Raises:
            ConfigurationError: If a referenced variable is unset and has no fallback.
        """
        if isinstance(value, str):
            return _expand(value)
        if isinstance(value, list):
            return [ConfigLoader.interpolate_env_vars(item) for item in value]
        if isinstance(value, dict):
            return {key: ConfigLoader.interpolate_env_vars(item) for key, item in value.items()}
        return value

    @staticmethod
    def load_config(explicit_path: Path | None = None) -> FileConfig | None:
        """Read and validate the configuration file, if there is one.

        Raises:
            ConfigurationError: If the file exists but cannot be used.
        """
        path = ConfigLoader.discover_config_file(explicit_path)
        if path is None:
            return None

        data = ConfigLoader.interpolate_env_vars(ConfigLoader.load_yaml(path))
        try:
            return FileConfig.model_validate(data)
        except ValidationError as e:
            msg = f"Invalid configuration in {path}: {e}"
            raise ConfigurationError(msg) from e

    @staticmethod
    def resolve_llm_config(
        file_config: FileConfig | None,
        cli_overrides: CLIOverrides | None = None,
    ) -> LLMConfig:
        """Settle the model session settings.

        Command line flags beat the ``llm:`` section, which beats the
        built-in ollama / llama3.2 default.

        Raises:
            ConfigurationError: If the merged settings are invalid.
        """
        values: dict[str, Any] = {"provider": DEFAULT_PROVIDER, "model": DEFAULT_MODEL}
        if file_config is not None and file_config.llm is not None:
            values |= file_config.llm.model_dump(exclude_none=True)
        if cli_overrides is not None:
            flags = cli_overrides.model_dump(exclude_none=True)
            if "api_key" in flags:
                flags["api_key"] = SecretStr(flags["api_key"])
            values |= flags

        try:
            return LLMConfig.model_validate(values)
        except ValidationError as e:
            msg = f"Invalid LLM configuration: {e}"
            raise ConfigurationError(msg) from e

    @staticmethod
    def resolve_agent_config(
        file_config: FileConfig | None,
        *,
        cli_max_iterations: int | None = None,
    ) -> AgentLoopConfig:
        """Agent loop settings, with an optional round budget from the command line."""
        config = file_config.agent if file_config else AgentLoopConfig()
        if cli_max_iterations is not None:
            config = config.model_copy(update={"max_iterations": cli_max_iterations})
        return config

    @staticmethod
    def resolve_autonomous_config(
        file_config: FileConfig | None,
        **cli_values: Any,
    ) -> AutonomousConfig:
        """Autonomous loop settings with command line field overrides.

        ``None`` values leave the file or default setting in place.

        Raises:
            ConfigurationError: If an override is out of range.
        """
        config = file_config.autonomous if file_config else AutonomousConfig()
        updates = {key: value for key, value in cli_values.items() if value is not None}
        if not updates:
            return config
        try:
            return AutonomousConfig.model_validate(config.model_dump() | updates)
        except ValidationError as e:
            msg = f"Invalid autonomous loop configuration: {e}"
            raise ConfigurationError(msg) from e
