"""Configuration data models.

Defines the structure for agentcore configuration including LLM provider settings
and the budgets of the agent and autonomous loops.
"""

from pydantic import BaseModel, Field, SecretStr

DEFAULT_COMPLETION_KEYWORDS = ("done", "complete", "finished")


class LLMConfig(BaseModel):
    """Configuration for an LLM provider."""

    provider: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    temperature: float = Field(default=0.0, ge=0.0, le=2.0)
    max_tokens: int = Field(default=4096, ge=1)
    api_key: SecretStr | None = None
    base_url: str | None = None
    # Context window size (mainly for Ollama, which defaults to only 2048)
    context_size: int | None = Field(default=None, ge=1024)


class AgentLoopConfig(BaseModel):
    """Configuration for a single agent loop session."""

    max_iterations: int = Field(default=10, ge=1)
    # Responses shorter than this after an action tool ran get a summary request
    min_summary_length: int = Field(default=10, ge=0)
    # Extra tool names treated as information gathering (never count as an action)
    read_only_tools: list[str] = Field(default_factory=list)


class AutonomousConfig(BaseModel):
    """Configuration for the autonomous loop."""

    max_iterations: int = Field(default=20, ge=1)
    agent_max_iterations: int = Field(default=10, ge=1)
    dev_server_command: str | None = None
    dev_server_cwd: str | None = None
    test_url: str | None = None
    success_criteria: str | None = None
    validation_interval: int = Field(default=3, ge=1)
    completion_keywords: list[str] = Field(
        default_factory=lambda: list(DEFAULT_COMPLETION_KEYWORDS)
    )
