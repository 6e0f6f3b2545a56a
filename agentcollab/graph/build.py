"""
Collaboration graph construction.

Builds the fixed plan -> execute -> integrate graph and runs it for one
collaboration.
"""

import logging
from typing import Sequence

from langgraph.graph import StateGraph, END

from agentcollab.collaboration.schemas import Collaboration
from agentcollab.graph.nodes import (
    decompose_node,
    execution_node,
    integration_node,
    planning_node,
)
from agentcollab.graph.runtime import RUNTIME_KEY, PipelineRuntime
from agentcollab.graph.state import PipelineState
from agentcollab.roster.schemas import Agent


logger = logging.getLogger(__name__)

# Compiled graph instance (shared across runs)
_graph = None


def create_pipeline_graph():
    """
    Create and compile the collaboration graph.

    The graph structure is:
        Entry -> decompose -> planning -> execution -> integration -> END

    The topology is fixed; there are no conditional edges and no cycles, so
    a run reaches END at most once.

    Returns:
        Compiled LangGraph application ready for execution.
    """
    graph = StateGraph(PipelineState)

    graph.add_node("decompose", decompose_node)
    graph.add_node("planning", planning_node)
    graph.add_node("execution", execution_node)
    graph.add_node("integration", integration_node)

    graph.set_entry_point("decompose")
    graph.add_edge("decompose", "planning")
    graph.add_edge("planning", "execution")
    graph.add_edge("execution", "integration")
    graph.add_edge("integration", END)

    app = graph.compile()

    return app


def get_graph():
    """Get or create the shared graph instance."""
    global _graph
    if _graph is None:
        _graph = create_pipeline_graph()
    return _graph


def run_pipeline(
    collaboration: Collaboration,
    roster: Sequence[Agent],
    user_message: str,
    runtime: PipelineRuntime,
    conversation_context: str = "",
) -> PipelineState:
    """
    Run one plan -> execute -> integrate pass over ``collaboration``.

    The collaboration is mutated in place and saved after every append.
    Input validation is the caller's job (see CollaborationService).

    Args:
        collaboration: Working copy of the aggregate
        roster: Assembled roster (tagged, in selected order)
        user_message: The user's request for this run
        runtime: Completion service, store, emitter and config for the run
        conversation_context: History window from before this run's user message

    Returns:
        Final pipeline state

    Raises:
        ConsumerDisconnected: If the event consumer went away mid-run
    """
    initial_state = {
        "collaboration": collaboration,
        "agents": list(roster),
        "user_message": user_message,
        "conversation_context": conversation_context,
        "coordinator": None,
        "decomposition": None,
        "plan": None,
        "execution_responses": [],
        "current_phase": "starting",
    }
    config = {
        "configurable": {"thread_id": collaboration.id, RUNTIME_KEY: runtime},
        "recursion_limit": runtime.config.recursion_limit,
    }

    logger.info(
        f"[collab={collaboration.id}] [graph=pipeline] [api=run] Invoking pipeline graph | "
        f"agents={len(roster)}, entry=decompose"
    )
    return get_graph().invoke(initial_state, config)
