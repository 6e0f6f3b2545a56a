"""
Agent roster.

Agents are fixed personas; the roster for a run is the resolved list of a
collaboration's selected agents, tagged coordinator/contributor.
"""

from agentcollab.roster.schemas import Agent, assemble_roster, select_coordinator
from agentcollab.roster.factory import AgentGenerationError, create_agent_from_prompt

__all__ = [
    "Agent",
    "assemble_roster",
    "select_coordinator",
    "AgentGenerationError",
    "create_agent_from_prompt",
]
