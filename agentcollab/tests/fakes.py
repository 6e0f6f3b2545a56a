"""
Test doubles for the collaboration pipeline.

ScriptedCompletion stands in for the OpenAI completion service. It works
out which phase a call belongs to from the prompt blocks and which agent
made it from the persona block, then answers from a script.
"""

import threading
import time
from typing import Any, Dict, List, Optional, Sequence, Tuple

from agentcollab.collaboration.schemas import Collaboration
from agentcollab.collaboration.service import CollaborationService
from agentcollab.decomposition.prompts.templates import DECOMPOSITION_SYSTEM_PROMPT
from agentcollab.graph.config import get_config
from agentcollab.roster.schemas import Agent
from agentcollab.storage.store import InMemoryStateStore


PERSONA_PREFIX = "You are "


def classify_call(messages: List[Dict[str, str]]) -> str:
    """Phase name for a list of prompt blocks."""
    if messages[0]["content"] == DECOMPOSITION_SYSTEM_PROMPT:
        return "decomposition"
    task = messages[-1]["content"]
    if "create a detailed collaboration plan" in task:
        return "planning"
    if "Your specific task:" in task:
        return "execution"
    if "integrate them into a coherent final result" in task:
        return "integration"
    if "creates specialized AI agents" in messages[0]["content"]:
        return "generation"
    return "unknown"


def persona_name(messages: List[Dict[str, str]]) -> str:
    """Agent name from a default ``You are <name>.`` persona block."""
    persona = messages[0]["content"]
    if persona.startswith(PERSONA_PREFIX):
        return persona[len(PERSONA_PREFIX):].rstrip(".")
    return persona


class ScriptedCompletion:
    """
    Completion service answering from a script.

    ``script`` maps (phase, agent name) to an answer. An answer may be a
    string, an exception instance (raised) or a callable taking the prompt
    blocks. Unscripted calls answer "<phase> by <agent name>". ``delays``
    maps the same keys to a sleep in seconds before answering.
    """

    def __init__(
        self,
        decomposition: Any = "",
        script: Optional[Dict[Tuple[str, str], Any]] = None,
        delays: Optional[Dict[Tuple[str, str], float]] = None,
        generation: Any = "",
    ):
        self.decomposition = decomposition
        self.generation = generation
        self.script = dict(script or {})
        self.delays = dict(delays or {})
        self.calls: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def complete(self, messages, temperature=None):
        phase = classify_call(messages)
        name = persona_name(messages)
        with self._lock:
            self.calls.append(
                {"phase": phase, "agent": name, "messages": messages, "temperature": temperature}
            )

        delay = self.delays.get((phase, name))
        if delay:
            time.sleep(delay)

        if phase == "decomposition":
            answer = self.decomposition
        elif phase == "generation":
            answer = self.generation
        else:
            answer = self.script.get((phase, name), f"{phase} by {name}")

        if isinstance(answer, Exception):
            raise answer
        if callable(answer):
            return answer(messages)
        return answer

    def calls_for(self, phase: str) -> List[Dict[str, Any]]:
        with self._lock:
            return [c for c in self.calls if c["phase"] == phase]


def make_agent(name: str, expertise: str = "general analysis", **kwargs) -> Agent:
    """Agent with the default persona so calls can be told apart by name."""
    return Agent(
        name=name,
        description=kwargs.pop("description", f"{name} helps with {expertise}"),
        expertise=expertise,
        **kwargs,
    )


def build_service(
    agents: Sequence[Agent],
    completion: ScriptedCompletion,
    **config_overrides,
) -> CollaborationService:
    """Service over in-memory stores, seeded with ``agents``."""
    agent_store = InMemoryStateStore(Agent)
    for agent in agents:
        agent_store.save(agent)
    return CollaborationService(
        collaborations=InMemoryStateStore(Collaboration),
        agents=agent_store,
        completion=completion,
        config=get_config(**config_overrides),
    )
