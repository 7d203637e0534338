"""Agent loop implementation.

Drives one conversation through rounds of "model responds, maybe call a tool"
until the model gives a genuine final answer or the round budget runs out.
"""

import logging
from collections.abc import Sequence

from agentcore.agent.heuristics import (
    describes_action,
    has_executed_action,
    is_too_terse,
    requests_action,
)
from agentcore.agent.parsing import DEFAULT_STRATEGIES, ParseStrategy, parse_tool_call
from agentcore.agent.prompts import (
    DESCRIBE_INSTEAD_OF_ACT_CORRECTION,
    EMPTY_RESPONSE_CORRECTION,
    SUMMARY_REQUEST,
    build_system_prompt,
    format_arguments,
    format_tool_result,
    format_tool_use,
)
from agentcore.exceptions import IterationLimitError
from agentcore.models.config import AgentLoopConfig
from agentcore.models.conversation import AgentLoopResult, AgentState, Message, ToolCall
from agentcore.providers.base import LLMProvider
from agentcore.tools.router import ToolRouter

logger = logging.getLogger(__name__)


class AgentLoop:
    """Iterate-until-done loop over a model session and a tool router.

    Each round asks the provider for a full response and classifies it:

    1. A tool call is dispatched through the router and its result is fed
       back; the loop always continues after a call, even a failed one.
    2. An empty response gets a correction asking for a tool call or a
       completion message.
    3. A response that announces an action the user asked for, before any
       action tool has run, gets a correction demanding the tool call.
    4. A very short response after an action tool ran gets a request for
       a human-readable summary.
    5. Anything else is the final answer.

    Tool failures and unparsable calls stay inside the conversation. Only
    running out of rounds is raised, as ``IterationLimitError``.
    """

    def __init__(
        self,
        provider: LLMProvider,
        router: ToolRouter,
        config: AgentLoopConfig | None = None,
        *,
        strategies: Sequence[ParseStrategy] = DEFAULT_STRATEGIES,
    ) -> None:
        """Initialize the agent loop.

        Args:
            provider: Model session producing responses.
            router: Capabilities the model may call.
            config: Round budget and heuristic thresholds.
            strategies: Tool call extraction strategies, tried in order.
        """
        self._provider = provider
        self._router = router
        self._config = config or AgentLoopConfig()
        self._strategies = tuple(strategies)

    async def run(
        self,
        message: str,
        previous_messages: Sequence[Message] | None = None,
    ) -> AgentLoopResult:
        """Run one session for a user message.

        Args:
            message: The user's request.
            previous_messages: Earlier conversation turns. System turns are
                dropped so the instructions appear only once.

        Returns:
            The final message, every tool call made and the rounds used.

        Raises:
            IterationLimitError: If no final answer arrives within the budget.
            LLMProviderError: If the model session fails.
        """
        state = self._initial_state(message, previous_messages or ())

        while state.iteration < state.max_iterations:
            state.iteration += 1
            logger.debug("Round %d/%d", state.iteration, state.max_iterations)

            response = await self._provider.complete(list(state.messages))

            call = parse_tool_call(response, self._strategies)
            if call is not None:
                await self._dispatch(state, call)
                continue

            correction = self._correction_for(state, message, response)
            if correction is not None:
                if response.strip():
                    state.messages.append(Message(role="assistant", content=response))
                state.messages.append(Message(role="system", content=correction))
                continue

            state.messages.append(Message(role="assistant", content=response))
            logger.debug("Final answer after %d round(s)", state.iteration)
            return AgentLoopResult(
                final_message=response,
                tool_calls=list(state.tool_calls),
                iterations=state.iteration,
            )

        raise IterationLimitError(state.max_iterations)

    def _initial_state(self, message: str, previous_messages: Sequence[Message]) -> AgentState:
        system_prompt = build_system_prompt(self._router.list_schemas())
        history = [m for m in previous_messages if m.role != "system"]
        return AgentState(
            messages=[
                Message(role="system", content=system_prompt),
                *history,
                Message(role="user", content=message),
            ],
            max_iterations=self._config.max_iterations,
        )

    async def _dispatch(self, state: AgentState, call: ToolCall) -> None:
        """Execute a call and append the request/result pair to the conversation."""
        logger.info("Calling tool %s with %s", call.name, format_arguments(call.arguments))
        state.tool_calls.append(call)
        state.messages.append(Message(role="assistant", content=format_tool_use(call)))

        result = await self._router.execute(call.name, call.arguments)

        state.tool_results.append(result)
        state.messages.append(Message(role="system", content=format_tool_result(call, result)))

    def _correction_for(self, state: AgentState, message: str, response: str) -> str | None:
        """Pick the corrective prompt for a non-tool response, if it needs one."""
        if not response.strip():
            logger.info("Empty response in round %d, asking again", state.iteration)
            return EMPTY_RESPONSE_CORRECTION

        acted = has_executed_action(state.tool_calls, self._config.read_only_tools)

        if not acted and requests_action(message) and describes_action(response):
            logger.info("Model described an action without executing it, correcting")
            return DESCRIBE_INSTEAD_OF_ACT_CORRECTION

        if acted and is_too_terse(response, self._config.min_summary_length):
            logger.info("Response too short after tool use, requesting a summary")
            return SUMMARY_REQUEST

        return None
