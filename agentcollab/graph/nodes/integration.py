"""
Integration node for the collaboration graph.

The coordinator merges the plan and every contribution into the final
result, which closes the collaboration.
"""

import logging
from typing import Dict, Any

from langchain_core.runnables import RunnableConfig

from agentcollab.collaboration.schemas import Message
from agentcollab.events.emitter import CompleteEvent, MessageEvent, PhaseEvent
from agentcollab.graph.prompts import build_integration_prompt, build_persona_messages
from agentcollab.graph.runtime import call_agent, get_runtime
from agentcollab.graph.state import PipelineState
from agentcollab.shared.logging.config import log_phase_transition


logger = logging.getLogger(__name__)

COMPLETE_TEXT = "Collaboration completed!"


def integration_node(state: PipelineState, config: RunnableConfig) -> Dict[str, Any]:
    """
    Integrate all contributions and complete the collaboration.

    The final message and the completed status are saved together, then
    the message event and the terminal complete event are emitted.

    Args:
        state: Current pipeline state
        config: Runnable config carrying the run's PipelineRuntime

    Returns:
        State updates marking the run done
    """
    runtime = get_runtime(config)
    collaboration = state["collaboration"]
    coordinator = state["coordinator"]
    responses = state.get("execution_responses") or []
    _log = f"[collab={collaboration.id}] [graph=pipeline] [node=integration] "

    logger.info(
        f"{_log}Entering node | coordinator={coordinator.name}, contributions={len(responses)}"
    )

    runtime.emitter.emit(
        PhaseEvent(
            phase="integration",
            agent_id=coordinator.id,
            agent_name=coordinator.name,
            text=f"{coordinator.name} is integrating all contributions...",
        )
    )

    context = state["conversation_context"]
    prompt = build_integration_prompt(
        state["user_message"],
        state["plan"],
        [(r["agent"], r["response"]) for r in responses],
    )
    final_result = call_agent(
        runtime,
        coordinator,
        build_persona_messages(coordinator, prompt, context),
        phase="integration",
    )

    final_message = Message.from_agent(coordinator, final_result, "integration")
    collaboration.append_message(final_message)
    collaboration.complete(final_result)
    runtime.store.save(collaboration)

    runtime.emitter.emit(MessageEvent(message=final_message))
    runtime.emitter.emit(CompleteEvent(text=COMPLETE_TEXT))

    logger.info(f"{_log}Pipeline complete | final_chars={len(final_result)} -> END")
    log_phase_transition("integration_done", state)

    return {"current_phase": "done"}
