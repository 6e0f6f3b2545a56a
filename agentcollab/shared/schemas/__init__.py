"""Common base models."""

from agentcollab.shared.schemas.base import CamelModel, utc_now

__all__ = ["CamelModel", "utc_now"]
