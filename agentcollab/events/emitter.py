"""
Pipeline progress events and the channel that carries them.

The pipeline is the single producer; one consumer (the SSE transport or
a test) reads events in the exact order they were emitted. The channel is
an unbounded FIFO, so nothing is ever dropped. When the consumer goes
away it closes the channel, and the producer's next ``emit`` raises
``ConsumerDisconnected`` so the run can stop before the next phase.
"""

import logging
import queue
import threading
from typing import Annotated, Iterator, List, Literal, Optional, Union

from pydantic import Field

from agentcollab.collaboration.schemas import Message, Phase
from agentcollab.shared.schemas.base import CamelModel


logger = logging.getLogger(__name__)


# =============================================================================
# Event models
# =============================================================================


class PhaseEvent(CamelModel):
    type: Literal["phase"] = "phase"
    phase: Phase
    agent_id: Optional[str] = None
    agent_name: Optional[str] = None
    text: str


class AgentWorkingEvent(CamelModel):
    type: Literal["agent_working"] = "agent_working"
    agent_id: str
    agent_name: str
    text: str


class MessageEvent(CamelModel):
    type: Literal["message"] = "message"
    message: Message


class CompleteEvent(CamelModel):
    type: Literal["complete"] = "complete"
    text: str


Event = Annotated[
    Union[PhaseEvent, AgentWorkingEvent, MessageEvent, CompleteEvent],
    Field(discriminator="type"),
]


# =============================================================================
# Channel
# =============================================================================


class ConsumerDisconnected(Exception):
    """Raised to the producer when the consumer has closed the channel."""

    pass


_END = object()


class EventEmitter:
    """
    Ordered, lossless hand-off of pipeline events to a single consumer.

    Producer side: ``emit`` then ``finish`` when the run is over.
    Consumer side: iterate ``events()``; call ``close()`` on disconnect.
    """

    def __init__(self):
        self._queue: "queue.Queue" = queue.Queue()
        self._closed = threading.Event()
        self._finished = False
        self._emitted = 0

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    @property
    def emitted_count(self) -> int:
        return self._emitted

    def emit(self, event: Event) -> None:
        """
        Queue an event for the consumer.

        Raises:
            ConsumerDisconnected: If the consumer has closed the channel
            RuntimeError: If called after ``finish``
        """
        if self._closed.is_set():
            raise ConsumerDisconnected("Event consumer is no longer reachable")
        if self._finished:
            raise RuntimeError("Cannot emit after the run has finished")
        self._queue.put(event)
        self._emitted += 1
        logger.debug(f"Emitted event #{self._emitted} | type={event.type}")

    def finish(self) -> None:
        """Mark the end of the stream; the consumer's iteration stops after draining."""
        if not self._finished:
            self._finished = True
            self._queue.put(_END)

    def close(self) -> None:
        """Consumer-side disconnect. Unblocks a waiting ``events()`` call."""
        if not self._closed.is_set():
            self._closed.set()
            self._queue.put(_END)

    def events(self, timeout: Optional[float] = None) -> Iterator[Event]:
        """
        Yield events in emission order until the stream ends.

        Args:
            timeout: Seconds to wait for each event; ``queue.Empty`` is
                raised if nothing arrives in time

        Yields:
            Events, oldest first
        """
        while True:
            item = self._queue.get(timeout=timeout)
            if item is _END:
                return
            yield item

    def drain(self) -> List[Event]:
        """All events already queued, without waiting."""
        drained = []
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                return drained
            if item is not _END:
                drained.append(item)
