"""
FastAPI endpoints for agents.

Provides REST API for registering agent personas, generating them from a
free-text description, and listing or removing them.
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, status
from starlette.concurrency import run_in_threadpool

from agentcollab.collaboration.collaboration_api import get_service
from agentcollab.collaboration.service import CollaborationService
from agentcollab.roster.factory import AgentGenerationError, create_agent_from_prompt
from agentcollab.roster.schemas import Agent, CreateAgentRequest, GenerateAgentRequest


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/agents", tags=["agents"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_agent(
    request: CreateAgentRequest,
    service: CollaborationService = Depends(get_service),
) -> Dict[str, Any]:
    """Register an agent with explicit persona fields."""
    agent = Agent(
        name=request.name.strip(),
        description=request.description,
        expertise=request.expertise,
        personality=request.personality,
        system_prompt=request.system_prompt,
        role=request.role,
    )
    service.agents.save(agent)
    logger.info(f"[api=agents] Agent created | id={agent.id}, name={agent.name}")
    return agent.to_dict()


@router.post("/generate", status_code=status.HTTP_201_CREATED)
async def generate_agent(
    request: GenerateAgentRequest,
    service: CollaborationService = Depends(get_service),
) -> Dict[str, Any]:
    """
    Generate an agent persona from a description and store it.

    Returns 502 when the completion service fails or its output cannot
    be turned into an agent.
    """
    try:
        agent = await run_in_threadpool(
            create_agent_from_prompt, request.prompt, service.completion
        )
    except AgentGenerationError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e

    service.agents.save(agent)
    return agent.to_dict()


@router.get("")
def list_agents(
    service: CollaborationService = Depends(get_service),
) -> List[Dict[str, Any]]:
    return [agent.to_dict() for agent in service.agents.list_all()]


@router.get("/{agent_id}")
def get_agent(
    agent_id: str,
    service: CollaborationService = Depends(get_service),
) -> Dict[str, Any]:
    agent = service.agents.load(agent_id)
    if agent is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Agent {agent_id} not found",
        )
    return agent.to_dict()


@router.delete("/{agent_id}")
def delete_agent(
    agent_id: str,
    service: CollaborationService = Depends(get_service),
) -> Dict[str, Any]:
    """
    Remove an agent.

    Collaborations that selected it keep the id; the agent is skipped
    when their roster is next resolved.
    """
    if not service.agents.delete(agent_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Agent {agent_id} not found",
        )
    logger.info(f"[api=agents] Agent deleted | id={agent_id}")
    return {"status": "deleted", "agent_id": agent_id}
