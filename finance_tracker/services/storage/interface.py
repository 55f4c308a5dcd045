"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Use an in-memory store for tests
2. Persist to a local file for the app ("cookie jar" semantics)
3. Keep the auth and transaction stores decoupled from the backend

The interface is intentionally cookie-shaped: string values under string
keys, each with an optional expiry. Anything structured is serialized to
JSON by the caller through get_json()/set_json().
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Optional

from finance_tracker.models.audit import AuditEvent


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptDataError(StorageError):
    """A stored value exists but could not be parsed."""

    def __init__(self, key: str, message: str):
        self.key = key
        super().__init__(f"Corrupt value under '{key}': {message}")


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for a key-value store with per-key expiry.

    Expired entries behave exactly like missing ones.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read a value.

        Returns:
            The stored string, or None if missing or expired
        """
        pass

    @abstractmethod
    def set(
        self,
        key: str,
        value: str,
        max_age_seconds: Optional[int] = None,
    ) -> None:
        """
        Write a value, replacing any previous one.

        Args:
            key: Entry name
            value: Serialized value
            max_age_seconds: Lifetime; None means no expiry

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a value. Missing keys are ignored."""
        pass

    def get_json(self, key: str) -> Optional[Any]:
        """
        Read and decode a JSON value.

        Raises:
            CorruptDataError: If the value is not valid JSON
        """
        raw = self.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError) as e:
            raise CorruptDataError(key, str(e)) from e

    def set_json(
        self,
        key: str,
        data: Any,
        max_age_seconds: Optional[int] = None,
    ) -> None:
        """Encode data as JSON and write it."""
        self.set(key, json.dumps(data, default=str), max_age_seconds)


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_recent_events(self, limit: int = 100) -> list[dict]:
        """
        Get the most recent audit events.

        Returns:
            List of event dicts (newest first)
        """
        pass
