"""
In-Memory Storage Implementation

Holds everything in dicts for the lifetime of the process.
Used by the tests and by the "memory" storage backend.
"""

import time
from collections import deque
from typing import Callable, Optional

from finance_tracker.models.audit import AuditEvent
from finance_tracker.services.storage.interface import (
    AuditStorageInterface,
    KeyValueStoreInterface,
)


class InMemoryKeyValueStore(KeyValueStoreInterface):
    """
    Dict-backed key-value store with expiry.

    Args:
        clock: Returns the current epoch time in seconds.
               Injectable so tests can move time forward.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        # key -> (value, expires_at or None)
        self._entries: dict[str, tuple[str, Optional[float]]] = {}

    def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(
        self,
        key: str,
        value: str,
        max_age_seconds: Optional[int] = None,
    ) -> None:
        expires_at = (
            self._clock() + max_age_seconds
            if max_age_seconds is not None
            else None
        )
        self._entries[key] = (value, expires_at)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


class InMemoryAuditStorage(AuditStorageInterface):
    """Bounded in-memory audit sink."""

    def __init__(self, max_events: int = 1000):
        self._events: deque[dict] = deque(maxlen=max_events)

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event.to_log_dict())
        return True

    def get_recent_events(self, limit: int = 100) -> list[dict]:
        return list(reversed(self._events))[:limit]
