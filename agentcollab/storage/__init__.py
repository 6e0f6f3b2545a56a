"""Keyed persistence for agents and collaborations."""

from agentcollab.storage.store import InMemoryStateStore, JsonFileStateStore, StateStore

__all__ = ["InMemoryStateStore", "JsonFileStateStore", "StateStore"]
