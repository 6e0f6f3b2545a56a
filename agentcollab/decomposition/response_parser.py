"""
Response parser for the task decomposer.

Handles JSON extraction from LLM responses (raw JSON, markdown code
blocks, etc.) and decodes the task breakdown with positional repair.
"""

import json
import logging
import re
from typing import Any, Dict, List, Sequence, Tuple

from agentcollab.roster.schemas import Agent
from agentcollab.shared.contracts.task_breakdown import (
    DecompositionResult,
    TaskAssignment,
    TaskBreakdown,
)


logger = logging.getLogger(__name__)

FALLBACK_STRATEGY = "Basic task distribution"

_CODE_BLOCK_PATTERN = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)
_DECODER = json.JSONDecoder()


class ParseError(Exception):
    """Raised when response parsing fails."""

    pass


def extract_json_from_response(raw_response: str) -> str:
    """
    Extract JSON content from LLM response.

    Handles multiple formats:
    - Raw JSON
    - JSON in markdown code blocks (```json ... ```)
    - JSON with leading/trailing whitespace

    Args:
        raw_response: Raw LLM response string

    Returns:
        Cleaned JSON string ready for parsing
    """
    content = raw_response.strip()

    # Try to extract from markdown code block (the language tag may be any case)
    match = _CODE_BLOCK_PATTERN.search(content)
    if match:
        content = match.group(1).strip()

    # Decode the first JSON value so braces inside strings don't end it early
    starts = [i for i in (content.find("{"), content.find("[")) if i != -1]
    if starts:
        start = min(starts)
        try:
            _, end = _DECODER.raw_decode(content, start)
            return content[start:end]
        except json.JSONDecodeError:
            pass

    # If we can't find clear boundaries, return as-is and let JSON parser handle it
    return content


def parse_json_object(raw_response: str) -> Dict[str, Any]:
    """
    Parse an LLM response that should contain a single JSON object.

    Raises:
        ParseError: If the response is empty, not JSON, or not an object
    """
    if not raw_response or not raw_response.strip():
        raise ParseError("Empty response")

    json_str = extract_json_from_response(raw_response)

    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ParseError(f"Failed to parse response JSON: {e}\nContent: {json_str}")

    if not isinstance(data, dict):
        raise ParseError(f"Expected a JSON object, got {type(data).__name__}")

    return data


# =============================================================================
# Task breakdown decoding
# =============================================================================


def fallback_role(index: int) -> str:
    """Role label for the agent at 0-based ``index``."""
    return f"Expert {index + 1}"


def fallback_task(agent: Agent) -> str:
    return f"Provide your expert perspective from your {agent.expertise} expertise"


def build_fallback_breakdown(agents: Sequence[Agent]) -> TaskBreakdown:
    """Deterministic plan used when the model output cannot be used at all."""
    return TaskBreakdown(
        strategy=FALLBACK_STRATEGY,
        assignments=[
            TaskAssignment(agent_id=agent.id, role=fallback_role(i), task=fallback_task(agent))
            for i, agent in enumerate(agents)
        ],
    )


def _text_field(raw: Any, key: str) -> str:
    if not isinstance(raw, dict):
        return ""
    value = raw.get(key)
    if not isinstance(value, str):
        return ""
    return value.strip()


def _repair_assignments(
    agents: Sequence[Agent],
    raw_assignments: Any,
) -> Tuple[List[TaskAssignment], bool]:
    """Align raw assignments to the roster by position, filling gaps."""
    repaired = False
    if not isinstance(raw_assignments, list):
        raw_assignments = []
        repaired = True
    elif len(raw_assignments) != len(agents):
        repaired = True

    assignments = []
    for i, agent in enumerate(agents):
        raw = raw_assignments[i] if i < len(raw_assignments) else None
        role = _text_field(raw, "role")
        task = _text_field(raw, "task")
        if not role:
            role = fallback_role(i)
            repaired = True
        if not task:
            task = fallback_task(agent)
            repaired = True
        assignments.append(TaskAssignment(agent_id=agent.id, role=role, task=task))

    return assignments, repaired


def decode_task_breakdown(raw_response: str, agents: Sequence[Agent]) -> DecompositionResult:
    """
    Decode a decomposition response into a roster-aligned TaskBreakdown.

    Never raises: unusable output yields the fallback plan, partially valid
    output is repaired per position. Agent ids are always taken from the
    roster, so an invented id on its own is not treated as a repair.

    Args:
        raw_response: Raw LLM response string (may be empty)
        agents: Roster the assignments must align with

    Returns:
        DecompositionResult tagged parsed / repaired / fallback
    """
    try:
        data = parse_json_object(raw_response)
    except ParseError as e:
        logger.warning(f"Task breakdown unusable, using fallback: {e}")
        return DecompositionResult(outcome="fallback", breakdown=build_fallback_breakdown(agents))

    assignments, repaired = _repair_assignments(agents, data.get("assignments"))

    strategy = _text_field(data, "strategy")
    if not strategy:
        strategy = FALLBACK_STRATEGY
        repaired = True

    if repaired:
        raw_assignments = data.get("assignments")
        returned = len(raw_assignments) if isinstance(raw_assignments, list) else 0
        logger.info(
            f"Task breakdown repaired | returned={returned}, expected={len(agents)}"
        )

    return DecompositionResult(
        outcome="repaired" if repaired else "parsed",
        breakdown=TaskBreakdown(strategy=strategy, assignments=assignments),
    )
