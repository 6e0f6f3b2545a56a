"""LLM client utilities."""

from agentcollab.shared.llm.client import (
    CompletionService,
    OpenAICompletionService,
    get_cached_client,
    call_llm,
)

__all__ = [
    "CompletionService",
    "OpenAICompletionService",
    "get_cached_client",
    "call_llm",
]
