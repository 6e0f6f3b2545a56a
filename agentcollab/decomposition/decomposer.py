"""
Task decomposer.

Asks the completion service for one role/task assignment per agent and
decodes the answer with positional repair. Any failure along the way ends
in the deterministic fallback plan, so callers always get a usable
breakdown with exactly one assignment per agent.
"""

import logging
import time
from typing import Optional, Sequence

from agentcollab.decomposition.prompts.builders import build_decomposition_messages
from agentcollab.decomposition.response_parser import (
    build_fallback_breakdown,
    decode_task_breakdown,
)
from agentcollab.roster.schemas import Agent
from agentcollab.shared.contracts.task_breakdown import DecompositionResult
from agentcollab.shared.llm.client import CompletionService
from agentcollab.shared.logging.debug_logger import DebugLogger


logger = logging.getLogger(__name__)

DECOMPOSITION_TEMPERATURE = 0.3


def decompose(
    agents: Sequence[Agent],
    user_message: str,
    completion: CompletionService,
    temperature: float = DECOMPOSITION_TEMPERATURE,
    debug_logger: Optional[DebugLogger] = None,
) -> DecompositionResult:
    """
    Turn a user request and a roster into a per-agent assignment plan.

    Args:
        agents: Roster in selected order
        user_message: The user's request
        completion: Service used for the single decomposition call
        temperature: Sampling temperature for the call
        debug_logger: Optional per-run trace logger

    Returns:
        DecompositionResult whose breakdown has len(agents) assignments
    """
    if not agents:
        return DecompositionResult(outcome="fallback", breakdown=build_fallback_breakdown([]))

    messages = build_decomposition_messages(agents, user_message)

    start_time = time.perf_counter()
    error = None
    try:
        raw_response = completion.complete(messages, temperature=temperature)
    except Exception as e:
        logger.warning(f"Decomposition call failed, using fallback: {e}")
        raw_response = ""
        error = str(e)
    duration_ms = (time.perf_counter() - start_time) * 1000

    if debug_logger:
        debug_logger.log_llm_call(
            phase="decomposition",
            agent_name="decomposer",
            messages=messages,
            response=raw_response or "",
            duration_ms=duration_ms,
            error=error,
        )

    result = decode_task_breakdown(raw_response or "", agents)

    logger.info(
        f"Decomposition finished | outcome={result.outcome}, "
        f"assignments={len(result.breakdown.assignments)}, duration={duration_ms:.0f}ms"
    )
    return result
