"""
Schemas for the collaboration aggregate.

Defines the append-only Message, the Collaboration transcript with its
status state machine, and the API request/response models.
"""

import uuid
from typing import Any, Dict, List, Literal, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from agentcollab.roster.schemas import Agent
from agentcollab.shared.schemas.base import CamelModel, utc_now


MessageRole = Literal["user", "agent", "system"]
Phase = Literal["planning", "execution", "integration"]
CollaborationStatus = Literal["active", "completed", "paused"]


class InvalidTransitionError(Exception):
    """Raised when the collaboration state machine is driven out of order."""

    pass


# =============================================================================
# Message
# =============================================================================


class Message(CamelModel):
    """A single transcript entry. Never mutated once appended."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    role: MessageRole
    content: str
    agent_id: Optional[str] = None
    agent_name: Optional[str] = None
    timestamp: str = Field(default_factory=utc_now)
    phase: Optional[Phase] = None

    @classmethod
    def from_user(cls, content: str) -> "Message":
        return cls(role="user", content=content)

    @classmethod
    def from_agent(cls, agent: Agent, content: str, phase: Phase) -> "Message":
        return cls(
            role="agent",
            content=content,
            agent_id=agent.id,
            agent_name=agent.name,
            phase=phase,
        )


# =============================================================================
# Collaboration aggregate
# =============================================================================


class Collaboration(CamelModel):
    """
    Durable aggregate holding a roster, a transcript and a status.

    The transcript only grows through ``append_message``; ``complete`` is
    the only way to reach the terminal ``completed`` status and sets
    ``final_result`` at the same time.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    description: str = ""
    selected_agents: List[str] = Field(default_factory=list)
    messages: List[Message] = Field(default_factory=list)
    status: CollaborationStatus = "active"
    created_at: str = Field(default_factory=utc_now)
    updated_at: str = Field(default_factory=utc_now)
    final_result: Optional[str] = None

    @classmethod
    def create(
        cls,
        name: str,
        description: str,
        selected_agents: Sequence[str],
    ) -> "Collaboration":
        """New active collaboration; agent ids are de-duplicated in order."""
        unique_ids = list(dict.fromkeys(selected_agents))
        now = utc_now()
        return cls(
            name=name,
            description=description,
            selected_agents=unique_ids,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_completed(self) -> bool:
        return self.status == "completed"

    def append_message(self, message: Message) -> Message:
        """Append to the transcript and refresh ``updated_at``."""
        if self.is_completed:
            raise InvalidTransitionError(
                f"Collaboration {self.id} is completed; transcript is closed"
            )
        self.messages.append(message)
        self.updated_at = utc_now()
        return message

    def complete(self, final_result: str) -> None:
        """Record the integrated result and move to ``completed``."""
        if self.is_completed or self.final_result is not None:
            raise InvalidTransitionError(f"Collaboration {self.id} is already completed")
        self.final_result = final_result
        self.status = "completed"
        self.updated_at = utc_now()

    def messages_in_phase(self, phase: Phase) -> List[Message]:
        return [m for m in self.messages if m.phase == phase]


# =============================================================================
# API Request/Response Models
# =============================================================================


class CreateCollaborationRequest(BaseModel):
    """Request to create a collaboration."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(description="Collaboration name")
    description: str = Field(description="What the collaboration is about")
    selected_agents: List[str] = Field(
        alias="selectedAgents", description="Agent ids, in roster order"
    )


class SendMessageRequest(BaseModel):
    """Request to start a pipeline run with a new user message."""

    message: str = Field(description="The user's request")


class RunResponse(BaseModel):
    """Result of a non-streaming pipeline run."""

    collaboration: Dict[str, Any] = Field(description="Collaboration after the run")
    events: List[Dict[str, Any]] = Field(
        default_factory=list, description="Events emitted during the run, in order"
    )
