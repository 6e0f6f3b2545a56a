"""
Server-sent events framing for pipeline events.

Each event is one ``data: <JSON>`` line followed by a blank line; the
stream ends with a literal ``data: [DONE]`` line after the ``complete``
event. Readers ignore any line not prefixed ``data: ``.
"""

import json
from typing import Any, Dict, Iterable, Iterator

from pydantic import TypeAdapter

from agentcollab.events.emitter import Event


SSE_PREFIX = "data: "
SSE_DONE_MARKER = "[DONE]"
SSE_DONE = f"{SSE_PREFIX}{SSE_DONE_MARKER}\n\n"

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}

_event_adapter = TypeAdapter(Event)


def format_sse(event: Event) -> str:
    """Serialize one event as an SSE data frame."""
    return f"{SSE_PREFIX}{event.to_json()}\n\n"


def iter_sse_payloads(lines: Iterable[str]) -> Iterator[Dict[str, Any]]:
    """
    Decode the JSON payloads of an SSE stream.

    Stops at the ``[DONE]`` marker. Lines without the ``data: `` prefix
    (comments, heartbeats, blank separators) are skipped.
    """
    for line in lines:
        line = line.rstrip("\r\n")
        if not line.startswith(SSE_PREFIX):
            continue
        payload = line[len(SSE_PREFIX):].strip()
        if payload == SSE_DONE_MARKER:
            return
        yield json.loads(payload)


def parse_event(payload: Dict[str, Any]) -> Event:
    """Validate a decoded payload back into its event model."""
    return _event_adapter.validate_python(payload)
