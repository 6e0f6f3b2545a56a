"""
Collaboration aggregate.

The durable transcript + status state machine mutated by the pipeline,
and the context window built from it. The service that drives runs lives
in ``agentcollab.collaboration.service``.
"""

from agentcollab.collaboration.schemas import Collaboration, Message
from agentcollab.collaboration.context import build_conversation_context

__all__ = ["Collaboration", "Message", "build_conversation_context"]
