"""
Keyed state stores for agents and collaborations.

Both implementations persist the camelCase JSON form of a pydantic model
keyed by its ``id``. Records are serialized on ``save`` and re-parsed on
``load``, so the object a caller holds is always a separate working
buffer from the stored state.
"""

import logging
import os
import threading
from pathlib import Path
from typing import Dict, Generic, List, Optional, Protocol, Type, TypeVar

from pydantic import ValidationError

from agentcollab.shared.schemas.base import CamelModel


logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=CamelModel)

JSON_INDENT = 2


class StateStore(Protocol[RecordT]):
    """Durable key-value persistence for records with an ``id``."""

    def save(self, record: RecordT) -> None:
        ...

    def load(self, record_id: str) -> Optional[RecordT]:
        ...

    def list_all(self) -> List[RecordT]:
        ...

    def delete(self, record_id: str) -> bool:
        ...


def serialize_record(record: CamelModel) -> str:
    return record.to_json(indent=JSON_INDENT)


class InMemoryStateStore(Generic[RecordT]):
    """Process-local store holding serialized JSON text per id."""

    def __init__(self, model_cls: Type[RecordT]):
        self.model_cls = model_cls
        self._records: Dict[str, str] = {}
        self._lock = threading.Lock()

    def save(self, record: RecordT) -> None:
        data = serialize_record(record)
        with self._lock:
            self._records[record.id] = data

    def load(self, record_id: str) -> Optional[RecordT]:
        with self._lock:
            data = self._records.get(record_id)
        if data is None:
            return None
        return self.model_cls.model_validate_json(data)

    def list_all(self) -> List[RecordT]:
        with self._lock:
            payloads = list(self._records.values())
        records = [self.model_cls.model_validate_json(p) for p in payloads]
        return sorted(records, key=lambda r: getattr(r, "created_at", ""), reverse=True)

    def delete(self, record_id: str) -> bool:
        with self._lock:
            return self._records.pop(record_id, None) is not None

    def raw(self, record_id: str) -> Optional[str]:
        """Stored JSON text for ``record_id``."""
        with self._lock:
            return self._records.get(record_id)


class JsonFileStateStore(Generic[RecordT]):
    """
    Store writing one ``<id>.json`` file per record under ``directory``.

    Writes go to a temporary file first and are moved into place, so a
    crash mid-write never leaves a truncated record behind.
    """

    def __init__(self, directory: str, model_cls: Type[RecordT]):
        self.directory = Path(directory)
        self.model_cls = model_cls
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, record_id: str) -> Path:
        if not record_id or "/" in record_id or "\\" in record_id or record_id.startswith("."):
            raise ValueError(f"Invalid record id: {record_id!r}")
        return self.directory / f"{record_id}.json"

    def save(self, record: RecordT) -> None:
        path = self._path(record.id)
        tmp_path = path.with_name(f".{path.name}.tmp")
        tmp_path.write_text(serialize_record(record), encoding="utf-8")
        os.replace(tmp_path, path)

    def load(self, record_id: str) -> Optional[RecordT]:
        try:
            path = self._path(record_id)
        except ValueError:
            return None
        if not path.exists():
            return None
        return self.model_cls.model_validate_json(path.read_text(encoding="utf-8"))

    def list_all(self) -> List[RecordT]:
        records = []
        for path in self.directory.glob("*.json"):
            try:
                records.append(self.model_cls.model_validate_json(path.read_text(encoding="utf-8")))
            except ValidationError as e:
                logger.warning(f"Skipping unreadable record {path.name}: {e}")
        return sorted(records, key=lambda r: getattr(r, "created_at", ""), reverse=True)

    def delete(self, record_id: str) -> bool:
        try:
            path = self._path(record_id)
        except ValueError:
            return False
        if not path.exists():
            return False
        path.unlink()
        return True

    def raw(self, record_id: str) -> Optional[str]:
        """Stored JSON text for ``record_id``."""
        path = self._path(record_id)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")
