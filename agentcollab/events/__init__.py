"""Pipeline progress events, the ordered channel and SSE framing."""

from agentcollab.events.emitter import (
    AgentWorkingEvent,
    CompleteEvent,
    ConsumerDisconnected,
    Event,
    EventEmitter,
    MessageEvent,
    PhaseEvent,
)
from agentcollab.events.sse import SSE_DONE, format_sse, iter_sse_payloads, parse_event

__all__ = [
    "AgentWorkingEvent",
    "CompleteEvent",
    "ConsumerDisconnected",
    "Event",
    "EventEmitter",
    "MessageEvent",
    "PhaseEvent",
    "SSE_DONE",
    "format_sse",
    "iter_sse_payloads",
    "parse_event",
]
