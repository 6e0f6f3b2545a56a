"""
Schemas for agents and roster assembly.

Defines the immutable Agent persona, the coordinator/contributor role tag,
the roster assembly step that decides the tag, and the API request models
for the agents router.
"""

import uuid
from typing import List, Literal, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from agentcollab.shared.schemas.base import CamelModel, utc_now


AgentRole = Literal["coordinator", "contributor"]

DEFAULT_COORDINATOR_KEYWORDS = ("coordinator", "coordination")


# =============================================================================
# Agent
# =============================================================================


class Agent(CamelModel):
    """
    A fixed persona used to parameterize completion calls.

    ``system_prompt`` is sent as the first block of every call made on the
    agent's behalf. ``role`` stays unset until roster assembly decides it.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    description: str = ""
    expertise: str = ""
    personality: str = ""
    system_prompt: str = ""
    role: Optional[AgentRole] = None
    created_at: str = Field(default_factory=utc_now)
    updated_at: str = Field(default_factory=utc_now)

    @property
    def is_coordinator(self) -> bool:
        return self.role == "coordinator"


# =============================================================================
# Roster assembly
# =============================================================================


def _matches_coordinator_signal(agent: Agent, keywords: Sequence[str]) -> bool:
    name = agent.name.lower()
    expertise = agent.expertise.lower()
    return any(k in name or k in expertise for k in keywords)


def assemble_roster(
    agents: Sequence[Agent],
    keywords: Sequence[str] = DEFAULT_COORDINATOR_KEYWORDS,
) -> List[Agent]:
    """
    Tag every agent as coordinator or contributor, keeping roster order.

    Exactly one agent ends up as coordinator, chosen as:
    1. the first agent already tagged ``coordinator``
    2. else the first agent whose name or expertise mentions a keyword
    3. else the first agent

    Args:
        agents: Resolved agents in ``selected_agents`` order
        keywords: Lower-case coordinator signals

    Returns:
        New list of tagged Agent copies (inputs are not modified)
    """
    if not agents:
        return []

    index = next((i for i, a in enumerate(agents) if a.role == "coordinator"), None)
    if index is None:
        index = next(
            (i for i, a in enumerate(agents) if _matches_coordinator_signal(a, keywords)),
            0,
        )

    return [
        agent.model_copy(update={"role": "coordinator" if i == index else "contributor"})
        for i, agent in enumerate(agents)
    ]


def select_coordinator(roster: Sequence[Agent]) -> Agent:
    """First agent tagged coordinator, else the first agent in the roster."""
    if not roster:
        raise ValueError("Cannot select a coordinator from an empty roster")
    for agent in roster:
        if agent.is_coordinator:
            return agent
    return roster[0]


# =============================================================================
# API Request Models
# =============================================================================


class CreateAgentRequest(BaseModel):
    """Request to register an agent with explicit persona fields."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1, description="Agent name")
    description: str = Field(default="", description="What the agent does")
    expertise: str = Field(default="", description="Area of expertise")
    personality: str = Field(default="", description="Communication style")
    system_prompt: str = Field(
        default="", alias="systemPrompt", description="Persona instructions"
    )
    role: Optional[AgentRole] = Field(
        default=None, description="Pin the agent as coordinator or contributor"
    )


class GenerateAgentRequest(BaseModel):
    """Request to generate an agent persona from a free-text description."""

    prompt: str = Field(min_length=1, description="Description of the desired agent")
