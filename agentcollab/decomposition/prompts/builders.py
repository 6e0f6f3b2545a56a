"""
Prompt builders for the task decomposer.

These functions construct the actual messages sent to the completion
service from the roster and the user request.
"""

from typing import Dict, List, Sequence

from agentcollab.decomposition.prompts.templates import (
    DECOMPOSITION_SYSTEM_PROMPT,
    DECOMPOSITION_USER_PROMPT_TEMPLATE,
    ROSTER_LINE_TEMPLATE,
)
from agentcollab.roster.schemas import Agent


def build_roster_listing(agents: Sequence[Agent]) -> str:
    """Numbered roster listing with ids, expertise and descriptions."""
    return "\n".join(
        ROSTER_LINE_TEMPLATE.format(
            number=i + 1,
            name=agent.name,
            id=agent.id,
            expertise=agent.expertise,
            description=agent.description,
        )
        for i, agent in enumerate(agents)
    )


def build_decomposition_messages(
    agents: Sequence[Agent],
    user_message: str,
) -> List[Dict[str, str]]:
    """
    Build the single decomposition request.

    Args:
        agents: Roster in selected order
        user_message: The user's request

    Returns:
        Role-tagged blocks: coordination instructions, then the task prompt
    """
    user_prompt = DECOMPOSITION_USER_PROMPT_TEMPLATE.format(
        user_message=user_message,
        roster=build_roster_listing(agents),
    )
    return [
        {"role": "system", "content": DECOMPOSITION_SYSTEM_PROMPT},
        {"role": "user", "content": user_prompt},
    ]
