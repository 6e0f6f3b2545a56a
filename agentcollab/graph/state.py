"""
Pipeline state schema.

Defines the state that flows through the collaboration graph. The
collaboration object is the working buffer of the aggregate; every node
that appends to it saves it before emitting the matching event.
"""

from typing import List, Optional, TypedDict

from agentcollab.collaboration.schemas import Collaboration
from agentcollab.roster.schemas import Agent
from agentcollab.shared.contracts.task_breakdown import DecompositionResult


class ExecutionResponse(TypedDict):
    """One contributor's execution-phase answer."""

    agent: Agent
    response: str


class PipelineState(TypedDict):
    """
    State schema for the collaboration graph.

    ``agents`` is the assembled roster (tagged, in selected order).
    ``conversation_context`` is the history window taken before this run's
    user message; every phase reuses it.
    Phase outputs are filled in as the run moves forward.
    """

    # Run inputs
    collaboration: Collaboration
    agents: List[Agent]
    user_message: str
    conversation_context: str

    # Planning outputs
    coordinator: Optional[Agent]
    decomposition: Optional[DecompositionResult]
    plan: Optional[str]

    # Execution outputs, in roster order
    execution_responses: List[ExecutionResponse]

    # Tracking
    current_phase: str
