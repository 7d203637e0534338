"""Autonomous loop implementation.

Runs the agent loop cycle after cycle towards a goal, optionally alongside a
dev server it owns, and periodically checks the running application in a
browser against success criteria.
"""

import logging
import os
from collections.abc import Mapping
from typing import Any

from agentcore.agent.loop import AgentLoop
from agentcore.autonomous.prompts import (
    build_analysis_prompt,
    build_criteria_prompt,
    build_cycle_prompt,
    is_affirmative,
    mentions_completion,
)
from agentcore.models.config import AgentLoopConfig, AutonomousConfig
from agentcore.models.conversation import AutonomousLoopResult, ToolCall, ToolResult
from agentcore.providers.base import LLMProvider
from agentcore.tools.router import ToolRouter

logger = logging.getLogger(__name__)

# Capability names consumed by convention
SERVER_START_TOOL = "server.start"
SERVER_STOP_TOOL = "server.stop"
BROWSER_OPEN_TOOL = "browser.open"
BROWSER_SCREENSHOT_TOOL = "browser.screenshot"
BROWSER_CONSOLE_TOOL = "browser.console_logs"

VALIDATION_TOOLS = (BROWSER_OPEN_TOOL, BROWSER_SCREENSHOT_TOOL, BROWSER_CONSOLE_TOOL)


def _result_field(result: ToolResult, key: str) -> Any:
    """Read ``key`` from a successful mapping result, else None."""
    if result.success and isinstance(result.result, Mapping):
        return result.result.get(key)
    return None


class AutonomousLoop:
    """Outer controller running agent sessions until a goal is reached.

    A cycle is one full agent loop session. The loop succeeds when a cycle's
    final message mentions a completion keyword, or when a periodic browser
    validation judges the success criteria met. Running out of cycles is a
    normal unsuccessful outcome, not an exception.

    When a dev server command is configured, the server is started before
    the first cycle and stopped exactly once on every exit path.
    """

    def __init__(
        self,
        provider: LLMProvider,
        router: ToolRouter,
        config: AutonomousConfig | None = None,
        agent_config: AgentLoopConfig | None = None,
    ) -> None:
        """Initialize the autonomous loop.

        Args:
            provider: Model session shared by every cycle.
            router: Capabilities, including the server and browser tools.
            config: Cycle budget, dev server and validation settings.
            agent_config: Settings for each agent session. Defaults to the
                round budget in ``config.agent_max_iterations``.
        """
        self._config = config or AutonomousConfig()
        self._router = router
        if agent_config is None:
            agent_config = AgentLoopConfig(max_iterations=self._config.agent_max_iterations)
        self._agent = AgentLoop(provider, router, agent_config)

    async def run(self, goal: str) -> AutonomousLoopResult:
        """Pursue a goal across cycles.

        Args:
            goal: What the agent should achieve.

        Returns:
            Outcome with success flag, cycles run, final message and every
            tool call made by the goal-directed sessions.

        Raises:
            IterationLimitError: If a cycle's agent session exhausts its rounds.
            LLMProviderError: If the model session fails.
        """
        max_iterations = self._config.max_iterations
        tool_calls: list[ToolCall] = []
        iteration = 0
        server_pid: Any = None

        try:
            server_pid = await self._start_server()

            while iteration < max_iterations:
                iteration += 1
                logger.info("Cycle %d/%d", iteration, max_iterations)

                agent_result = await self._agent.run(build_cycle_prompt(goal, iteration))
                tool_calls.extend(agent_result.tool_calls)

                if self._should_validate(iteration):
                    summary = await self._validate()
                    if summary is not None:
                        logger.info("Success criteria met in cycle %d", iteration)
                        return AutonomousLoopResult(
                            success=True,
                            iterations=iteration,
                            final_message=summary,
                            tool_calls=tool_calls,
                        )

                keywords = self._config.completion_keywords
                if mentions_completion(agent_result.final_message, keywords):
                    logger.info("Agent reported completion in cycle %d", iteration)
                    return AutonomousLoopResult(
                        success=True,
                        iterations=iteration,
                        final_message=agent_result.final_message,
                        tool_calls=tool_calls,
                    )

            logger.info("Reached maximum iterations (%d)", max_iterations)
            return AutonomousLoopResult(
                success=False,
                iterations=iteration,
                final_message=f"Reached maximum iterations ({max_iterations})",
                tool_calls=tool_calls,
            )
        finally:
            if server_pid is not None:
                await self._stop_server(server_pid)

    async def _start_server(self) -> Any:
        """Start the configured dev server and return its pid, if any."""
        command = self._config.dev_server_command
        if not command:
            return None

        cwd = self._config.dev_server_cwd or os.getcwd()
        result = await self._router.execute(SERVER_START_TOOL, {"command": command, "cwd": cwd})
        if not result.success:
            logger.warning("Failed to start dev server: %s", result.error)
            return None

        pid = _result_field(result, "pid")
        if pid is None:
            logger.warning("Dev server started without reporting a pid; it will not be stopped")
        else:
            logger.info("Started dev server %r (pid %s)", command, pid)
        return pid

    async def _stop_server(self, pid: Any) -> None:
        # Teardown must never mask the loop's own outcome
        try:
            result = await self._router.execute(SERVER_STOP_TOOL, {"pid": pid})
        except Exception as e:
            logger.debug("Failed to stop dev server %s: %s", pid, e)
            return
        if not result.success:
            logger.debug("Failed to stop dev server %s: %s", pid, result.error)

    def _should_validate(self, iteration: int) -> bool:
        return (
            bool(self._config.test_url)
            and iteration % self._config.validation_interval == 0
            and self._router.has(*VALIDATION_TOOLS)
        )

    async def _validate(self) -> str | None:
        """Inspect the running app and judge the success criteria.

        Returns:
            The state analysis when the criteria are judged met, else None.
        """
        await self._router.execute(BROWSER_OPEN_TOOL, {"url": self._config.test_url})
        screenshot_result = await self._router.execute(BROWSER_SCREENSHOT_TOOL, {})
        console_result = await self._router.execute(BROWSER_CONSOLE_TOOL, {})
        screenshot = _result_field(screenshot_result, "screenshot")
        logs = _result_field(console_result, "logs")

        analysis = await self._agent.run(
            build_analysis_prompt(bool(screenshot), logs if isinstance(logs, list) else [])
        )

        criteria = self._config.success_criteria
        if not criteria:
            return None

        verdict = await self._agent.run(build_criteria_prompt(criteria, analysis.final_message))
        logger.debug("Criteria verdict: %s", verdict.final_message)
        if is_affirmative(verdict.final_message):
            return analysis.final_message
        return None
