"""Prompt templates and builders for the task decomposer."""

from agentcollab.decomposition.prompts.templates import (
    DECOMPOSITION_SYSTEM_PROMPT,
    AGENT_GENERATION_SYSTEM_PROMPT,
)
from agentcollab.decomposition.prompts.builders import (
    build_roster_listing,
    build_decomposition_messages,
)

__all__ = [
    "DECOMPOSITION_SYSTEM_PROMPT",
    "AGENT_GENERATION_SYSTEM_PROMPT",
    "build_roster_listing",
    "build_decomposition_messages",
]
