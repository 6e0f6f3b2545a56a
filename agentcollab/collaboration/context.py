"""
Conversation context windowing.

Completion calls that need history see at most the last N transcript
messages, one "<speaker>: <content>" line each. This is a hard cutoff on
message count, not a token-aware summary.
"""

from typing import List, Sequence

from agentcollab.collaboration.schemas import Message


DEFAULT_CONTEXT_WINDOW = 10


def speaker_label(message: Message) -> str:
    if message.role == "user":
        return "User"
    if message.role == "system":
        return "System"
    return message.agent_name or "Agent"


def window_messages(
    messages: Sequence[Message],
    window: int = DEFAULT_CONTEXT_WINDOW,
) -> List[str]:
    """Render the last ``window`` messages, oldest first."""
    if window <= 0:
        return []
    return [f"{speaker_label(m)}: {m.content}" for m in list(messages)[-window:]]


def build_conversation_context(
    messages: Sequence[Message],
    window: int = DEFAULT_CONTEXT_WINDOW,
) -> str:
    """Context block for prompts; empty string when there is no history."""
    lines = window_messages(messages, window)
    if not lines:
        return ""
    return "Previous messages in this collaboration:\n" + "\n\n".join(lines)
