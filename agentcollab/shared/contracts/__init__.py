"""Contracts for hand-offs between the decomposer and the pipeline."""

from agentcollab.shared.contracts.task_breakdown import (
    DecompositionOutcome,
    DecompositionResult,
    TaskAssignment,
    TaskBreakdown,
)

__all__ = [
    "DecompositionOutcome",
    "DecompositionResult",
    "TaskAssignment",
    "TaskBreakdown",
]
