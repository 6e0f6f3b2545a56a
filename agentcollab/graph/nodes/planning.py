"""
Decomposition and planning nodes for the collaboration graph.

The decomposition node produces the per-agent role/task breakdown and
picks the coordinator; the planning node asks the coordinator for the
plan that every contributor follows.
"""

import logging
from typing import Dict, Any

from langchain_core.runnables import RunnableConfig

from agentcollab.collaboration.schemas import Message
from agentcollab.decomposition.decomposer import decompose
from agentcollab.events.emitter import PhaseEvent
from agentcollab.graph.prompts import build_persona_messages, build_planning_prompt
from agentcollab.graph.runtime import call_agent, get_runtime, record_message
from agentcollab.graph.state import PipelineState
from agentcollab.roster.schemas import select_coordinator
from agentcollab.shared.logging.config import log_phase_transition


logger = logging.getLogger(__name__)


def decompose_node(state: PipelineState, config: RunnableConfig) -> Dict[str, Any]:
    """
    Break the user request into one assignment per agent.

    Never fails: the decomposer falls back to a deterministic plan.

    Args:
        state: Current pipeline state
        config: Runnable config carrying the run's PipelineRuntime

    Returns:
        State updates with decomposition and coordinator
    """
    runtime = get_runtime(config)
    collaboration = state["collaboration"]
    agents = state["agents"]
    _log = f"[collab={collaboration.id}] [graph=pipeline] [node=decompose] "

    logger.info(f"{_log}Entering node | agents={len(agents)}")

    result = decompose(
        agents,
        state["user_message"],
        runtime.completion,
        temperature=runtime.config.decomposition_temperature,
        debug_logger=runtime.debug_logger,
    )
    coordinator = select_coordinator(agents)

    logger.info(
        f"{_log}Node finished | outcome={result.outcome}, "
        f"coordinator={coordinator.name}, strategy={result.breakdown.strategy!r}"
    )

    return {
        "decomposition": result,
        "coordinator": coordinator,
        "current_phase": "decomposed",
    }


def planning_node(state: PipelineState, config: RunnableConfig) -> Dict[str, Any]:
    """
    Ask the coordinator for the collaboration plan.

    Emits the planning phase event, appends the plan as a planning-tagged
    agent message, saves, and emits the message event.

    Args:
        state: Current pipeline state
        config: Runnable config carrying the run's PipelineRuntime

    Returns:
        State updates with the plan
    """
    runtime = get_runtime(config)
    collaboration = state["collaboration"]
    coordinator = state["coordinator"]
    agents = state["agents"]
    _log = f"[collab={collaboration.id}] [graph=pipeline] [node=planning] "

    logger.info(f"{_log}Entering node | coordinator={coordinator.name}")

    runtime.emitter.emit(
        PhaseEvent(
            phase="planning",
            agent_id=coordinator.id,
            agent_name=coordinator.name,
            text=f"{coordinator.name} is planning the collaboration...",
        )
    )

    context = state["conversation_context"]
    prompt = build_planning_prompt(agents, state["user_message"], state["decomposition"].breakdown)
    plan = call_agent(
        runtime,
        coordinator,
        build_persona_messages(coordinator, prompt, context),
        phase="planning",
    )

    record_message(runtime, collaboration, Message.from_agent(coordinator, plan, "planning"))

    logger.info(f"{_log}Node finished | plan_chars={len(plan)}")
    log_phase_transition("planning_done", state, extra={"plan_chars": len(plan)})

    return {"plan": plan, "current_phase": "planning"}
