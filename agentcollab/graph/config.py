"""
Configuration for the collaboration pipeline.

Centralizes all configuration options for the LangGraph workflow,
making it easy to tune behavior without modifying the graph wiring.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from agentcollab.collaboration.context import DEFAULT_CONTEXT_WINDOW
from agentcollab.decomposition.decomposer import DECOMPOSITION_TEMPERATURE
from agentcollab.roster.schemas import DEFAULT_COORDINATOR_KEYWORDS


@dataclass(frozen=True)
class PipelineConfig:
    """
    Configuration for the plan -> execute -> integrate pipeline.

    Attributes:
        recursion_limit: Maximum number of graph steps
        model: Model identifier for the OpenAI completion service
        temperature: Sampling temperature for planning/execution/integration
        decomposition_temperature: Sampling temperature for task decomposition
        context_window: Number of trailing transcript messages given as context
        max_workers: Upper bound on concurrent execution-phase calls
        coordinator_keywords: Name/expertise signals for picking the coordinator
        debug_logs_dir: Directory for per-run trace files (None disables them)
    """

    # Graph execution limits
    recursion_limit: int = 10

    # LLM configuration
    model: str = "gpt-4o-mini"
    temperature: float = 0.7
    decomposition_temperature: float = DECOMPOSITION_TEMPERATURE

    # Context windowing
    context_window: int = DEFAULT_CONTEXT_WINDOW

    # Execution fan-out
    max_workers: int = 4

    # Roster assembly
    coordinator_keywords: Tuple[str, ...] = field(
        default_factory=lambda: tuple(DEFAULT_COORDINATOR_KEYWORDS)
    )

    # Debug tracing
    debug_logs_dir: Optional[str] = None


# Default configuration instance
DEFAULT_CONFIG = PipelineConfig()


def get_config(**overrides) -> PipelineConfig:
    """
    Create a configuration with optional overrides.

    Keyword arguments whose value is None are ignored, so callers can pass
    optional settings straight through.

    Returns:
        PipelineConfig with specified overrides applied
    """
    changes = {k: v for k, v in overrides.items() if v is not None}
    return replace(DEFAULT_CONFIG, **changes)
