"""
Tests for the event emitter channel and SSE framing.
"""

import json
import queue
import threading

import pytest

from agentcollab.collaboration.schemas import Message
from agentcollab.events.emitter import (
    AgentWorkingEvent,
    CompleteEvent,
    ConsumerDisconnected,
    EventEmitter,
    MessageEvent,
    PhaseEvent,
)
from agentcollab.events.sse import (
    SSE_DONE,
    format_sse,
    iter_sse_payloads,
    parse_event,
)


def _make_events():
    return [
        PhaseEvent(phase="planning", agent_id="a1", agent_name="Lead", text="Lead is planning..."),
        AgentWorkingEvent(agent_id="a2", agent_name="Helper", text="Helper is working..."),
        MessageEvent(message=Message.from_user("hello")),
        CompleteEvent(text="Collaboration completed!"),
    ]


# ============================================================================
# Emitter
# ============================================================================


class TestEventEmitter:
    """Tests for the EventEmitter channel."""

    def test_events_in_emission_order(self):
        """The consumer sees every event in the order it was emitted."""
        emitter = EventEmitter()
        events = _make_events()
        for event in events:
            emitter.emit(event)
        emitter.finish()

        assert list(emitter.events()) == events
        assert emitter.emitted_count == 4

    def test_consumer_on_another_thread(self):
        """Events cross threads without loss or reordering."""
        emitter = EventEmitter()
        received = []
        consumer = threading.Thread(target=lambda: received.extend(emitter.events(timeout=5)))
        consumer.start()

        for i in range(50):
            emitter.emit(CompleteEvent(text=str(i)))
        emitter.finish()
        consumer.join(timeout=5)

        assert [e.text for e in received] == [str(i) for i in range(50)]

    def test_emit_after_close_raises(self):
        """A closed channel tells the producer the consumer is gone."""
        emitter = EventEmitter()
        emitter.close()

        assert emitter.closed is True
        with pytest.raises(ConsumerDisconnected):
            emitter.emit(CompleteEvent(text="late"))

    def test_emit_after_finish_raises(self):
        """Nothing can be emitted once the run has finished."""
        emitter = EventEmitter()
        emitter.finish()

        with pytest.raises(RuntimeError):
            emitter.emit(CompleteEvent(text="late"))

    def test_close_unblocks_waiting_consumer(self):
        """A consumer blocked on events() returns once the channel closes."""
        emitter = EventEmitter()
        done = threading.Event()

        def _consume():
            list(emitter.events(timeout=5))
            done.set()

        consumer = threading.Thread(target=_consume)
        consumer.start()
        emitter.close()
        consumer.join(timeout=5)

        assert done.is_set()

    def test_events_timeout(self):
        """A consumer with a timeout gives up when nothing arrives."""
        emitter = EventEmitter()
        with pytest.raises(queue.Empty):
            next(emitter.events(timeout=0.01))

    def test_drain_skips_end_marker(self):
        """drain returns only real events."""
        emitter = EventEmitter()
        emitter.emit(CompleteEvent(text="done"))
        emitter.finish()

        assert [e.type for e in emitter.drain()] == ["complete"]
        assert emitter.drain() == []


# ============================================================================
# SSE framing
# ============================================================================


class TestSSE:
    """Tests for server-sent event framing."""

    def test_frame_format(self):
        """Each event is one data line with camelCase JSON and a blank line."""
        frame = format_sse(
            PhaseEvent(phase="planning", agent_id="a1", agent_name="Lead", text="planning")
        )

        assert frame.startswith("data: ")
        assert frame.endswith("\n\n")
        payload = json.loads(frame[len("data: "):])
        assert payload == {
            "type": "phase",
            "phase": "planning",
            "agentId": "a1",
            "agentName": "Lead",
            "text": "planning",
        }

    def test_unset_fields_are_omitted(self):
        """The execution phase event has no agent fields."""
        frame = format_sse(PhaseEvent(phase="execution", text="executing"))
        assert "agentId" not in json.loads(frame[len("data: "):])

    def test_done_marker(self):
        """The stream terminator is a literal [DONE] data line."""
        assert SSE_DONE == "data: [DONE]\n\n"

    def test_stream_decodes_back_to_events(self):
        """A framed stream parses back into the same events."""
        events = _make_events()
        body = "".join(format_sse(e) for e in events) + SSE_DONE

        decoded = [parse_event(p) for p in iter_sse_payloads(body.splitlines())]

        assert decoded == events

    def test_reader_ignores_other_lines_and_stops_at_done(self):
        """Comments and anything after [DONE] are ignored."""
        lines = [
            ": keep-alive",
            'data: {"type": "complete", "text": "ok"}',
            "",
            "data: [DONE]",
            'data: {"type": "complete", "text": "after"}',
        ]

        assert list(iter_sse_payloads(lines)) == [{"type": "complete", "text": "ok"}]

    def test_message_event_payload(self):
        """Message events embed the full message in camelCase."""
        message = Message.from_user("hello")
        payload = json.loads(format_sse(MessageEvent(message=message))[len("data: "):])

        assert payload["type"] == "message"
        assert payload["message"]["id"] == message.id
        assert payload["message"]["role"] == "user"
        assert "agentId" not in payload["message"]
