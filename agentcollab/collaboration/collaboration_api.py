"""
FastAPI endpoints for collaborations.

Provides the API to create and inspect collaborations and to run the
plan -> execute -> integrate pipeline for a new user message, either
streamed as server-sent events or synchronously.
"""

import logging
import os
import threading
from typing import Any, Dict, List, Sequence

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse
from starlette.concurrency import run_in_threadpool

from agentcollab.collaboration.schemas import (
    Collaboration,
    CreateCollaborationRequest,
    RunResponse,
    SendMessageRequest,
)
from agentcollab.collaboration.service import (
    CollaborationClosedError,
    CollaborationInputError,
    CollaborationNotFoundError,
    CollaborationService,
)
from agentcollab.events.emitter import EventEmitter
from agentcollab.events.sse import SSE_DONE, SSE_HEADERS, format_sse
from agentcollab.graph.config import get_config
from agentcollab.roster.schemas import Agent
from agentcollab.shared.llm.client import OpenAICompletionService
from agentcollab.storage.store import JsonFileStateStore


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/collaborations", tags=["collaborations"])

# Shared service instance (created on first use)
_service = None


def get_service() -> CollaborationService:
    """Get or create the shared service backed by JSON files under AGENTCOLLAB_DATA_DIR."""
    global _service
    if _service is None:
        data_dir = os.environ.get("AGENTCOLLAB_DATA_DIR", "data")
        config = get_config(
            model=os.environ.get("AGENTCOLLAB_MODEL"),
            debug_logs_dir=os.environ.get("AGENTCOLLAB_DEBUG_LOGS_DIR"),
        )
        _service = CollaborationService(
            collaborations=JsonFileStateStore(os.path.join(data_dir, "collaborations"), Collaboration),
            agents=JsonFileStateStore(os.path.join(data_dir, "agents"), Agent),
            completion=OpenAICompletionService(model=config.model, temperature=config.temperature),
            config=config,
        )
    return _service


def raise_for_input_error(error: CollaborationInputError) -> None:
    """Map an input error to the matching HTTP status."""
    if isinstance(error, CollaborationNotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, CollaborationClosedError):
        code = status.HTTP_409_CONFLICT
    else:
        code = status.HTTP_400_BAD_REQUEST
    raise HTTPException(status_code=code, detail=str(error)) from error


def _run_in_background(
    service: CollaborationService,
    collaboration: Collaboration,
    roster: Sequence[Agent],
    message: str,
    emitter: EventEmitter,
) -> None:
    try:
        service.run(collaboration, roster, message, emitter)
    except Exception as e:
        logger.exception(f"[collab={collaboration.id}] [api=stream] Pipeline failed: {e}")


# ============================================================================
# Endpoints
# ============================================================================


@router.post("", status_code=status.HTTP_201_CREATED)
def create_collaboration(
    request: CreateCollaborationRequest,
    service: CollaborationService = Depends(get_service),
) -> Dict[str, Any]:
    """Create a collaboration over the given agents."""
    try:
        collaboration = service.create_collaboration(
            request.name, request.description, request.selected_agents
        )
    except CollaborationInputError as e:
        raise_for_input_error(e)
    return collaboration.to_dict()


@router.get("")
def list_collaborations(
    service: CollaborationService = Depends(get_service),
) -> List[Dict[str, Any]]:
    """All collaborations, newest first."""
    return [c.to_dict() for c in service.list_collaborations()]


@router.get("/{collaboration_id}")
def get_collaboration(
    collaboration_id: str,
    service: CollaborationService = Depends(get_service),
) -> Dict[str, Any]:
    try:
        collaboration = service.get_collaboration(collaboration_id)
    except CollaborationInputError as e:
        raise_for_input_error(e)
    return collaboration.to_dict()


@router.post("/{collaboration_id}/messages", response_model=RunResponse)
def send_message(
    collaboration_id: str,
    request: SendMessageRequest,
    service: CollaborationService = Depends(get_service),
) -> RunResponse:
    """
    Run the pipeline for a new user message and wait for it to finish.

    Returns the collaboration after the run and every event it emitted.
    """
    try:
        collaboration, emitter = service.send_message(collaboration_id, request.message)
    except CollaborationInputError as e:
        raise_for_input_error(e)

    return RunResponse(
        collaboration=collaboration.to_dict(),
        events=[event.to_dict() for event in emitter.drain()],
    )


@router.post("/{collaboration_id}/stream")
async def stream_message(
    collaboration_id: str,
    request: SendMessageRequest,
    service: CollaborationService = Depends(get_service),
) -> StreamingResponse:
    """
    Run the pipeline for a new user message, streaming progress as SSE.

    Input errors are returned as plain HTTP errors before the stream
    opens. The pipeline runs on a worker thread; if the client goes away
    the emitter is closed and the run stops before its next phase.
    """
    try:
        collaboration, roster = await run_in_threadpool(
            service.prepare_run, collaboration_id, request.message
        )
    except CollaborationInputError as e:
        raise_for_input_error(e)

    _log = f"[collab={collaboration_id}] [api=stream] "
    emitter = EventEmitter()
    worker = threading.Thread(
        target=_run_in_background,
        args=(service, collaboration, roster, request.message, emitter),
        name=f"pipeline-{collaboration_id}",
        daemon=True,
    )

    async def event_stream():
        worker.start()
        events = emitter.events()
        completed = False
        try:
            while True:
                event = await run_in_threadpool(next, events, None)
                if event is None:
                    break
                yield format_sse(event)
                if event.type == "complete":
                    completed = True
            if completed:
                yield SSE_DONE
            else:
                logger.warning(f"{_log}Stream ended without a complete event")
        finally:
            emitter.close()

    logger.info(f"{_log}Opening event stream | roster={len(roster)}")
    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
