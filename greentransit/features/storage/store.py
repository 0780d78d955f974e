"""
Key-value snapshot store.

The ledger reads whole values and writes back full replacements; there are no
partial updates. `commit` replaces every key in the mapping atomically: either
all of them are written or none are.

In-memory implementation here; `store_sql.SqlStore` keeps the same interface
on top of SQLAlchemy.
"""

from __future__ import annotations

import json
import threading
from typing import Any, Dict, Mapping, Optional, Protocol

PROFILE_KEY = "profile"
RECORDS_KEY = "travelRecords"
TASKS_KEY = "tasks"


class StoreError(Exception):
    """Raised by stores when a read or write cannot be completed."""


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[Any]:
        ...

    def commit(self, values: Mapping[str, Any]) -> None:
        ...

    def clear(self) -> None:
        ...

    def ping(self) -> bool:
        ...


def copy_json(value: Any) -> Any:
    """Values cross the store boundary as JSON, never as shared references."""
    try:
        return json.loads(json.dumps(value))
    except (TypeError, ValueError) as e:
        raise StoreError(f"value is not JSON serializable: {e}") from e


class InMemoryStore:
    """Process-local store; the dict is swapped whole on every commit."""

    def __init__(self, initial: Optional[Mapping[str, Any]] = None):
        self._lock = threading.Lock()
        self._data: Dict[str, Any] = {k: copy_json(v) for k, v in (initial or {}).items()}

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            if key not in self._data:
                return None
            return copy_json(self._data[key])

    def commit(self, values: Mapping[str, Any]) -> None:
        # Serialize everything first so a bad value leaves the store untouched
        staged = {k: copy_json(v) for k, v in values.items()}
        with self._lock:
            merged = dict(self._data)
            merged.update(staged)
            self._data = merged

    def clear(self) -> None:
        with self._lock:
            self._data = {}

    def ping(self) -> bool:
        return True

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._data)
