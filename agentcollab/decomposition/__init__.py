"""
Task decomposer.

Turns a user request plus the agent roster into a validated per-agent
role/task plan, falling back to a deterministic plan when the model
output cannot be used.
"""

from agentcollab.decomposition.decomposer import decompose
from agentcollab.decomposition.response_parser import (
    ParseError,
    decode_task_breakdown,
    extract_json_from_response,
)

__all__ = [
    "decompose",
    "ParseError",
    "decode_task_breakdown",
    "extract_json_from_response",
]
