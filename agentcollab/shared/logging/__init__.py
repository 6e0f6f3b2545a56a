"""Logging configuration and utilities."""

from agentcollab.shared.logging.config import setup_logging, log_phase_transition, StructuredFormatter
from agentcollab.shared.logging.debug_logger import (
    DebugLogger,
    get_or_create_logger,
    remove_logger,
)

__all__ = [
    "setup_logging",
    "log_phase_transition",
    "StructuredFormatter",
    "DebugLogger",
    "get_or_create_logger",
    "remove_logger",
]
