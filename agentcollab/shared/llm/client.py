"""
Completion service backed by the OpenAI client with retry logic.

The pipeline only depends on the ``CompletionService`` protocol; the
OpenAI implementation provides a cached client instance and a wrapper for
LLM calls with automatic retries using tenacity.
"""

import os
from typing import List, Dict, Optional, Protocol

from openai import OpenAI
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)
from dotenv import load_dotenv
load_dotenv()

# Module-level cache for OpenAI client
_client: Optional[OpenAI] = None

DEFAULT_MODEL = "gpt-4o-mini"


class CompletionService(Protocol):
    """
    Anything that turns role-tagged prompt blocks into generated text.

    ``messages`` is ordered: persona/system instructions first, then
    context, then the task. Implementations may raise or return an empty
    string; callers apply their own fallback rules.
    """

    def complete(
        self,
        messages: List[Dict[str, str]],
        temperature: Optional[float] = None,
    ) -> str:
        ...


def get_cached_client() -> OpenAI:
    """
    Returns a cached instance of the OpenAI client.

    Uses OPENAI_API_KEY environment variable for authentication.
    The client is created once and reused for all subsequent calls.
    """
    global _client
    if _client is None:
        api_key = os.environ.get("OPENAI_API_KEY")
        if not api_key:
            raise ValueError(
                "OPENAI_API_KEY environment variable is not set. "
                "Please set it to your OpenAI API key."
            )
        _client = OpenAI(api_key=api_key)
    return _client


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    retry=retry_if_exception_type((Exception,)),
    reraise=True,
)
def call_llm(
    messages: List[Dict[str, str]],
    model: str = DEFAULT_MODEL,
    client: Optional[OpenAI] = None,
    temperature: Optional[float] = None,
) -> str:
    """
    Call the OpenAI Chat Completion API with automatic retries.

    Args:
        messages: List of message dicts with 'role' and 'content' keys
        model: Model identifier to use (default: gpt-4o-mini)
        client: Optional OpenAI client instance. If not provided, uses cached client.
        temperature: Optional sampling temperature

    Returns:
        The assistant's response content as a string (empty if the model
        returned no content).

    Raises:
        Exception: If all retry attempts fail.
    """
    if client is None:
        client = get_cached_client()

    kwargs = {}
    if temperature is not None:
        kwargs["temperature"] = temperature

    response = client.chat.completions.create(
        model=model,
        messages=messages,
        **kwargs,
    )

    if not response.choices:
        return ""
    return (response.choices[0].message.content or "").strip()


class OpenAICompletionService:
    """CompletionService implementation that calls OpenAI through ``call_llm``."""

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        temperature: Optional[float] = None,
        client: Optional[OpenAI] = None,
    ):
        self.model = model
        self.temperature = temperature
        self._client = client

    def complete(
        self,
        messages: List[Dict[str, str]],
        temperature: Optional[float] = None,
    ) -> str:
        return call_llm(
            messages,
            model=self.model,
            client=self._client,
            temperature=temperature if temperature is not None else self.temperature,
        )
