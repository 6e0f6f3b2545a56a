"""
Base model for persisted and streamed records.

Python attributes are snake_case; the JSON written to the store and to
the event stream uses camelCase keys (agentId, selectedAgents, ...).
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utc_now() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


class CamelModel(BaseModel):
    """
    Base for all records that cross the store or the wire.

    Accepts both snake_case and camelCase on input. Use ``to_json`` /
    ``to_dict`` to serialize with camelCase keys and without unset
    optional fields.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_json(self, indent: Optional[int] = None) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=indent)
