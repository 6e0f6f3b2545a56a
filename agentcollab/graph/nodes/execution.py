"""
Execution node for the collaboration graph.

Every contributor (each agent except the coordinator) answers the plan
independently, so the calls are scattered over a bounded thread pool.
Results are gathered in roster order: message i is appended, saved and
emitted only after messages 0..i-1, whatever order the calls finish in.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Any

from langchain_core.runnables import RunnableConfig

from agentcollab.collaboration.schemas import Message
from agentcollab.events.emitter import AgentWorkingEvent, PhaseEvent
from agentcollab.graph.prompts import build_execution_prompt, build_persona_messages
from agentcollab.graph.runtime import call_agent, get_runtime, record_message
from agentcollab.graph.state import PipelineState
from agentcollab.shared.logging.config import log_phase_transition


logger = logging.getLogger(__name__)


def execution_node(state: PipelineState, config: RunnableConfig) -> Dict[str, Any]:
    """
    Run every contributor's part of the plan and join before integration.

    Args:
        state: Current pipeline state
        config: Runnable config carrying the run's PipelineRuntime

    Returns:
        State updates with execution_responses in roster order
    """
    runtime = get_runtime(config)
    collaboration = state["collaboration"]
    coordinator = state["coordinator"]
    agents = state["agents"]
    assignments = state["decomposition"].breakdown.assignments
    _log = f"[collab={collaboration.id}] [graph=pipeline] [node=execution] "

    contributors = [
        (agent, assignments[i]) for i, agent in enumerate(agents) if agent.id != coordinator.id
    ]
    logger.info(f"{_log}Entering node | contributors={len(contributors)}")

    runtime.emitter.emit(
        PhaseEvent(phase="execution", text="Agents are executing their tasks...")
    )

    if not contributors:
        logger.info(f"{_log}No contributors besides the coordinator")
        return {"execution_responses": [], "current_phase": "execution"}

    context = state["conversation_context"]
    workers = max(1, min(runtime.config.max_workers, len(contributors)))
    executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="execution")

    responses = []
    try:
        pending = []
        for agent, assignment in contributors:
            runtime.emitter.emit(
                AgentWorkingEvent(
                    agent_id=agent.id,
                    agent_name=agent.name,
                    text=f"{agent.name} is working on their part...",
                )
            )
            prompt = build_execution_prompt(agent, assignment, state["plan"], state["user_message"])
            messages = build_persona_messages(agent, prompt, context)
            pending.append((agent, executor.submit(call_agent, runtime, agent, messages, "execution")))

        for agent, future in pending:
            response = future.result()
            record_message(runtime, collaboration, Message.from_agent(agent, response, "execution"))
            responses.append({"agent": agent, "response": response})
            logger.info(f"{_log}Contribution recorded | agent={agent.name}, chars={len(response)}")
    finally:
        # On cancellation, calls still queued are dropped and running ones abandoned.
        executor.shutdown(wait=False, cancel_futures=True)

    log_phase_transition("execution_done", state, extra={"contributions": len(responses)})

    return {"execution_responses": responses, "current_phase": "execution"}
