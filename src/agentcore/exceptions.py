"""Custom exception hierarchy for agentcore.

All exceptions inherit from AgentCoreError for easy catching at the top level.
Only structural limits escape the loops; anything the model can react to is
turned into conversation feedback instead of being raised.
"""


class AgentCoreError(Exception):
    """Base exception for all agentcore errors."""


class ConfigurationError(AgentCoreError):
    """Configuration-related errors."""


class ProviderError(AgentCoreError):
    """LLM provider errors."""


class ProviderNotFoundError(ProviderError):
    """Requested provider is not registered."""


class ProviderConfigError(ProviderError):
    """Provider configuration is invalid."""


class LLMProviderError(ProviderError):
    """Error during LLM API call."""


class ToolError(AgentCoreError):
    """Tool capability errors."""


class ToolExecutionError(ToolError):
    """A tool reported a failure while executing."""


class MCPConnectionError(ToolError):
    """The MCP server could not be reached or dropped the connection."""


class OrchestrationError(AgentCoreError):
    """Agent loop orchestration errors."""


class IterationLimitError(OrchestrationError):
    """The agent loop used its whole round budget without a final answer."""

    def __init__(self, max_iterations: int) -> None:
        self.max_iterations = max_iterations
        super().__init__(f"Agent loop exceeded max iterations ({max_iterations})")