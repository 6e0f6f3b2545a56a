"""
Collaboration service.

Entry point for callers: creates collaborations, validates a new user
message, resolves the roster and drives one pipeline run. Input errors
are raised before anything is appended or emitted.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from agentcollab.collaboration.context import build_conversation_context
from agentcollab.collaboration.schemas import Collaboration, Message
from agentcollab.events.emitter import ConsumerDisconnected, EventEmitter
from agentcollab.graph.build import run_pipeline
from agentcollab.graph.config import DEFAULT_CONFIG, PipelineConfig
from agentcollab.graph.runtime import PipelineRuntime
from agentcollab.roster.schemas import Agent, assemble_roster
from agentcollab.shared.llm.client import CompletionService
from agentcollab.shared.logging.debug_logger import get_or_create_logger, remove_logger
from agentcollab.storage.store import StateStore


logger = logging.getLogger(__name__)


# =============================================================================
# Input errors
# =============================================================================


class CollaborationInputError(Exception):
    """A run was rejected before any phase started."""

    pass


class EmptyMessageError(CollaborationInputError):
    pass


class NoValidAgentsError(CollaborationInputError):
    pass


class CollaborationNotFoundError(CollaborationInputError):
    pass


class CollaborationClosedError(CollaborationInputError):
    pass


# =============================================================================
# Service
# =============================================================================


class CollaborationService:
    """
    Owns the stores and the completion service for collaboration runs.

    At most one run per collaboration is expected at a time; concurrent
    runs on the same id must be serialized by the caller.
    """

    def __init__(
        self,
        collaborations: StateStore,
        agents: StateStore,
        completion: CompletionService,
        config: PipelineConfig = DEFAULT_CONFIG,
    ):
        self.collaborations = collaborations
        self.agents = agents
        self.completion = completion
        self.config = config

    # -------------------------------------------------------------------------
    # Collaborations
    # -------------------------------------------------------------------------

    def create_collaboration(
        self,
        name: str,
        description: str,
        selected_agents: Sequence[str],
    ) -> Collaboration:
        """
        Create and persist a new active collaboration.

        Raises:
            CollaborationInputError: If name/description are blank or no agents are given
        """
        if not name.strip() or not description.strip():
            raise CollaborationInputError("Name and description are required")
        if not selected_agents:
            raise NoValidAgentsError("At least one agent must be selected")

        collaboration = Collaboration.create(name.strip(), description.strip(), selected_agents)
        self.collaborations.save(collaboration)
        logger.info(
            f"[collab={collaboration.id}] Collaboration created | "
            f"agents={len(collaboration.selected_agents)}"
        )
        return collaboration

    def get_collaboration(self, collaboration_id: str) -> Collaboration:
        collaboration = self.collaborations.load(collaboration_id)
        if collaboration is None:
            raise CollaborationNotFoundError(f"Collaboration {collaboration_id} not found")
        return collaboration

    def list_collaborations(self) -> List[Collaboration]:
        return self.collaborations.list_all()

    def resolve_roster(self, collaboration: Collaboration) -> List[Agent]:
        """Selected agents that still exist, tagged coordinator/contributor."""
        resolved = []
        for agent_id in collaboration.selected_agents:
            agent = self.agents.load(agent_id)
            if agent is None:
                logger.warning(f"[collab={collaboration.id}] Skipping unknown agent {agent_id}")
                continue
            resolved.append(agent)
        return assemble_roster(resolved, self.config.coordinator_keywords)

    # -------------------------------------------------------------------------
    # Runs
    # -------------------------------------------------------------------------

    def prepare_run(
        self,
        collaboration_id: str,
        message: str,
    ) -> Tuple[Collaboration, List[Agent]]:
        """
        Validate a new user message and resolve everything a run needs.

        Nothing is mutated or emitted here.

        Raises:
            EmptyMessageError: If the message is blank
            CollaborationNotFoundError: If the id is unknown
            CollaborationClosedError: If the collaboration is completed
            NoValidAgentsError: If none of the selected agents resolve
        """
        if not message or not message.strip():
            raise EmptyMessageError("Message is required")

        collaboration = self.get_collaboration(collaboration_id)
        if collaboration.is_completed:
            raise CollaborationClosedError(
                f"Collaboration {collaboration_id} is completed and accepts no new messages"
            )

        roster = self.resolve_roster(collaboration)
        if not roster:
            raise NoValidAgentsError("No valid agents found for this collaboration")

        return collaboration, roster

    def run(
        self,
        collaboration: Collaboration,
        roster: Sequence[Agent],
        message: str,
        emitter: EventEmitter,
    ) -> Collaboration:
        """
        Append the user message and run the pipeline, feeding ``emitter``.

        The emitter is always finished when this returns or raises. A
        consumer disconnect ends the run quietly with the status left as
        it was; the persisted transcript stays consistent.

        Returns:
            The collaboration after the run
        """
        _log = f"[collab={collaboration.id}] [service=run] "
        debug_logger = None
        if self.config.debug_logs_dir:
            debug_logger = get_or_create_logger(collaboration.id, self.config.debug_logs_dir)

        runtime = PipelineRuntime(
            completion=self.completion,
            store=self.collaborations,
            emitter=emitter,
            config=self.config,
            debug_logger=debug_logger,
        )

        outcome = "failed"
        try:
            # History as it stood before this request; the run's own messages are not context.
            context = build_conversation_context(
                collaboration.messages, self.config.context_window
            )
            collaboration.append_message(Message.from_user(message.strip()))
            self.collaborations.save(collaboration)

            logger.info(f"{_log}Run starting | roster={[a.name for a in roster]}")
            run_pipeline(collaboration, roster, message.strip(), runtime, context)
            outcome = "completed"
            logger.info(f"{_log}Run finished | status={collaboration.status}")
        except ConsumerDisconnected:
            # A disconnect after the final save still leaves a completed run.
            outcome = "completed" if collaboration.is_completed else "cancelled"
            logger.info(
                f"{_log}Consumer disconnected, run stopped | "
                f"status={collaboration.status}, messages={len(collaboration.messages)}"
            )
        finally:
            emitter.finish()
            if debug_logger:
                debug_logger.log_run_summary(outcome)
                debug_logger.export_calls_to_markdown()
                remove_logger(collaboration.id)

        return collaboration

    def send_message(
        self,
        collaboration_id: str,
        message: str,
        emitter: Optional[EventEmitter] = None,
    ) -> Tuple[Collaboration, EventEmitter]:
        """Validate, then run to completion. Returns the collaboration and the emitter used."""
        collaboration, roster = self.prepare_run(collaboration_id, message)
        emitter = emitter or EventEmitter()
        self.run(collaboration, roster, message, emitter)
        return collaboration, emitter
