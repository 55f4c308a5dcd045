"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Two backends exist: in-memory (tests) and a local JSON cookie jar (app).
"""

from finance_tracker.services.storage.interface import (
    AuditStorageInterface,
    CorruptDataError,
    KeyValueStoreInterface,
    StorageError,
)
from finance_tracker.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryKeyValueStore,
)
from finance_tracker.services.storage.file_store import (
    FileKeyValueStore,
    JsonLinesAuditStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "KeyValueStoreInterface",
    # Exceptions
    "CorruptDataError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryKeyValueStore",
    # File implementation
    "FileKeyValueStore",
    "JsonLinesAuditStorage",
]
