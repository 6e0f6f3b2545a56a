"""
Shared infrastructure for the collaboration pipeline.

Modules:
- llm: Completion service protocol and OpenAI client with retry logic
- logging: Structured JSON logging and per-run debug traces
- contracts: Decomposition output contract
- schemas: Common base models
"""

from agentcollab.shared.llm.client import CompletionService, call_llm
from agentcollab.shared.logging.config import setup_logging, log_phase_transition

__all__ = [
    "CompletionService",
    "call_llm",
    "setup_logging",
    "log_phase_transition",
]
