"""Prompt templates for the autonomous loop."""

import json
import re
from typing import Any

CONTINUE_NOTE = "\n\nIteration {iteration}. Continue working towards the goal."

ANALYSIS_PROMPT = """\
Analyze the current state of the running application.

Screenshot: {screenshot}
Console logs: {console_logs}

Does the application look correct? Are there any errors?"""

CRITERIA_CHECK_PROMPT = """\
Check if this criteria is met: "{criteria}"

Current state: {state}

Respond with "YES" if the criteria is met, "NO" otherwise."""

AFFIRMATIVE_PATTERN = re.compile(r"\bYES\b", re.IGNORECASE)


def build_cycle_prompt(goal: str, iteration: int) -> str:
    """The goal, plus a note to keep going on every cycle after the first."""
    if iteration <= 1:
        return goal
    return goal + CONTINUE_NOTE.format(iteration=iteration)


def build_analysis_prompt(screenshot_available: bool, console_logs: list[Any]) -> str:
    return ANALYSIS_PROMPT.format(
        screenshot="Available" if screenshot_available else "Not available",
        console_logs=json.dumps(console_logs, default=str),
    )


def build_criteria_prompt(criteria: str, state: str) -> str:
    return CRITERIA_CHECK_PROMPT.format(criteria=criteria, state=state)


def is_affirmative(answer: str) -> bool:
    """Whether the answer says YES as a word, in any case."""
    return AFFIRMATIVE_PATTERN.search(answer) is not None


def mentions_completion(message: str, keywords: list[str]) -> bool:
    """Whether the message contains any completion keyword, ignoring case."""
    lowered = message.lower()
    return any(keyword.lower() in lowered for keyword in keywords)
