"""
Run-time collaborators shared by the pipeline nodes.

The compiled graph is static; the completion service, store, emitter and
config of one run travel in ``config["configurable"]["runtime"]``.
"""

import logging
import time
from dataclasses import dataclass
from typing import Dict, List, Optional

from langchain_core.runnables import RunnableConfig

from agentcollab.collaboration.schemas import Collaboration, Message
from agentcollab.events.emitter import EventEmitter, MessageEvent
from agentcollab.graph.config import DEFAULT_CONFIG, PipelineConfig
from agentcollab.roster.schemas import Agent
from agentcollab.shared.llm.client import CompletionService
from agentcollab.shared.logging.debug_logger import DebugLogger
from agentcollab.storage.store import StateStore


logger = logging.getLogger(__name__)

RUNTIME_KEY = "runtime"


@dataclass
class PipelineRuntime:
    """Everything a node needs besides the graph state."""

    completion: CompletionService
    store: StateStore
    emitter: EventEmitter
    config: PipelineConfig = DEFAULT_CONFIG
    debug_logger: Optional[DebugLogger] = None


def get_runtime(config: RunnableConfig) -> PipelineRuntime:
    runtime = (config or {}).get("configurable", {}).get(RUNTIME_KEY)
    if runtime is None:
        raise RuntimeError("Pipeline invoked without a runtime in config['configurable']")
    return runtime


def call_agent(
    runtime: PipelineRuntime,
    agent: Agent,
    messages: List[Dict[str, str]],
    phase: str,
) -> str:
    """
    Call the completion service with an agent's persona.

    A failed or empty completion degrades to an empty string so one agent
    can never block the rest of the run.
    """
    start_time = time.perf_counter()
    error = None
    try:
        response = runtime.completion.complete(messages, temperature=runtime.config.temperature)
    except Exception as e:
        logger.exception(f"[phase={phase}] [agent={agent.name}] Completion failed: {e}")
        response = ""
        error = str(e)
    duration_ms = (time.perf_counter() - start_time) * 1000

    response = response or ""
    if not response and error is None:
        logger.warning(f"[phase={phase}] [agent={agent.name}] Completion returned no content")

    if runtime.debug_logger:
        runtime.debug_logger.log_llm_call(
            phase=phase,
            agent_name=agent.name,
            messages=messages,
            response=response,
            duration_ms=duration_ms,
            error=error,
        )

    return response


def record_message(
    runtime: PipelineRuntime,
    collaboration: Collaboration,
    message: Message,
) -> None:
    """Append, persist, then notify. Persistence always precedes the event."""
    collaboration.append_message(message)
    runtime.store.save(collaboration)
    runtime.emitter.emit(MessageEvent(message=message))
