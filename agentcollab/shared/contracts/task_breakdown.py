"""
Task decomposition output contract.

Defines the per-agent role/task plan handed from the decomposer to the
pipeline, and the tagged result that tells callers whether the plan came
from the model as-is, was repaired, or is the deterministic fallback.
"""

from typing import List, Literal

from pydantic import Field

from agentcollab.shared.schemas.base import CamelModel


DecompositionOutcome = Literal["parsed", "repaired", "fallback"]


class TaskAssignment(CamelModel):
    """Role and task for one agent in the roster."""

    agent_id: str = Field(description="Id of the assigned agent")
    role: str = Field(description="Short role label (e.g. 'Researcher')")
    task: str = Field(description="Free-text instruction for the agent")


class TaskBreakdown(CamelModel):
    """
    Contract for the decomposition plan.

    ``assignments`` is positionally aligned with the roster: assignment i
    belongs to agent i, and there is exactly one per agent.
    """

    strategy: str = Field(description="Collaboration strategy")
    assignments: List[TaskAssignment] = Field(default_factory=list)


class DecompositionResult(CamelModel):
    """A TaskBreakdown tagged with how it was obtained."""

    outcome: DecompositionOutcome
    breakdown: TaskBreakdown

    @property
    def used_model_output(self) -> bool:
        return self.outcome != "fallback"
