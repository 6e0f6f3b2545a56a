"""
Prompt templates and builders for the pipeline phases.

Every completion call is a list of role-tagged blocks: the agent's
persona first, then conversation context (when there is any), then the
phase task.
"""

from typing import Dict, List, Optional, Sequence

from agentcollab.roster.schemas import Agent
from agentcollab.shared.contracts.task_breakdown import TaskAssignment, TaskBreakdown


PLANNING_PROMPT_TEMPLATE = """As the coordinator, create a detailed collaboration plan for the following task:

Task: {user_message}

Available agents:
{roster}

Proposed role distribution ({strategy}):
{assignments}

Create a plan that consists of:
1. An overview of the approach
2. Specific steps and which agent executes each step
3. How the agents should collaborate with each other
4. Expected final result

Present this as a clear plan that the other agents can follow."""

EXECUTION_PROMPT_TEMPLATE = """Collaboration plan from the coordinator:
{plan}

Your role: {role}
Your specific task: {task}

Collaborate with the other agents according to the above plan. Focus on your expertise ({expertise}).

Task: {user_message}

Follow the plan and deliver your contribution that matches your expertise. Refer to the plan where relevant."""

INTEGRATION_PROMPT_TEMPLATE = """As the coordinator, review all agent contributions and integrate them into a coherent final result.

Original task: {user_message}

Your original plan:
{plan}

Agent contributions:
{contributions}

Integrate these contributions into a cohesive, complete final result that:
1. Combines the best elements from each contribution
2. Has a clear structure
3. Fully answers the original task
4. Shows how the collaboration led to a better result

Also provide a brief evaluation of how the collaboration went."""

CONTRIBUTION_SEPARATOR = "\n\n---\n\n"
NO_CONTRIBUTIONS_TEXT = "(no other agents contributed)"


def build_persona_messages(
    agent: Agent,
    prompt: str,
    context: Optional[str] = None,
) -> List[Dict[str, str]]:
    """Persona block, optional context block, then the task block."""
    messages = [{"role": "system", "content": agent.system_prompt or f"You are {agent.name}."}]
    if context:
        messages.append({"role": "system", "content": context})
    messages.append({"role": "user", "content": prompt})
    return messages


def _roster_with_expertise(agents: Sequence[Agent]) -> str:
    return "\n".join(
        f"{i + 1}. {agent.name} - Expertise: {agent.expertise}"
        for i, agent in enumerate(agents)
    )


def _assignment_lines(agents: Sequence[Agent], breakdown: TaskBreakdown) -> str:
    return "\n".join(
        f"- {agent.name} ({assignment.role}): {assignment.task}"
        for agent, assignment in zip(agents, breakdown.assignments)
    )


def build_planning_prompt(
    agents: Sequence[Agent],
    user_message: str,
    breakdown: TaskBreakdown,
) -> str:
    return PLANNING_PROMPT_TEMPLATE.format(
        user_message=user_message,
        roster=_roster_with_expertise(agents),
        strategy=breakdown.strategy,
        assignments=_assignment_lines(agents, breakdown),
    )


def build_execution_prompt(
    agent: Agent,
    assignment: TaskAssignment,
    plan: str,
    user_message: str,
) -> str:
    return EXECUTION_PROMPT_TEMPLATE.format(
        plan=plan,
        role=assignment.role,
        task=assignment.task,
        expertise=agent.expertise,
        user_message=user_message,
    )


def build_integration_prompt(
    user_message: str,
    plan: str,
    contributions: Sequence[tuple],
) -> str:
    """
    Args:
        user_message: The user's request
        plan: The coordinator's plan
        contributions: (agent, response) pairs in roster order
    """
    if contributions:
        text = CONTRIBUTION_SEPARATOR.join(
            f"{agent.name} ({agent.expertise}):\n{response}"
            for agent, response in contributions
        )
    else:
        text = NO_CONTRIBUTIONS_TEXT
    return INTEGRATION_PROMPT_TEMPLATE.format(
        user_message=user_message,
        plan=plan,
        contributions=text,
    )
