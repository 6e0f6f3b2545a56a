"""
Agent generation from a free-text description.

Asks the completion service for a persona in JSON and turns it into an
Agent record. Unlike decomposition there is no sensible default persona,
so failures are raised to the caller.
"""

import logging

from agentcollab.decomposition.prompts.templates import AGENT_GENERATION_SYSTEM_PROMPT
from agentcollab.decomposition.response_parser import ParseError, parse_json_object
from agentcollab.roster.schemas import Agent
from agentcollab.shared.llm.client import CompletionService


logger = logging.getLogger(__name__)

AGENT_GENERATION_TEMPERATURE = 0.7


class AgentGenerationError(Exception):
    """Raised when an agent persona cannot be generated."""

    pass


def create_agent_from_prompt(prompt: str, completion: CompletionService) -> Agent:
    """
    Generate an agent persona from a description.

    Args:
        prompt: Free-text description of the desired agent
        completion: Service used for the generation call

    Returns:
        New Agent with a fresh id and timestamps

    Raises:
        AgentGenerationError: If the call fails or returns unusable JSON
    """
    messages = [
        {"role": "system", "content": AGENT_GENERATION_SYSTEM_PROMPT},
        {"role": "user", "content": prompt},
    ]

    try:
        content = completion.complete(messages, temperature=AGENT_GENERATION_TEMPERATURE)
    except Exception as e:
        logger.exception(f"Agent generation call failed: {e}")
        raise AgentGenerationError("Failed to generate agent") from e

    try:
        data = parse_json_object(content)
    except ParseError as e:
        logger.error(f"Failed to parse agent data: {e}")
        raise AgentGenerationError("Failed to parse agent data") from e

    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        raise AgentGenerationError("Generated agent has no name")

    def _field(key: str) -> str:
        value = data.get(key)
        return value.strip() if isinstance(value, str) else ""

    agent = Agent(
        name=name.strip(),
        description=_field("description"),
        expertise=_field("expertise"),
        personality=_field("personality"),
        system_prompt=_field("systemPrompt"),
    )
    logger.info(f"Generated agent | id={agent.id}, name={agent.name}")
    return agent
