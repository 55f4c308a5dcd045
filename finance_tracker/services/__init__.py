"""Services package."""

from finance_tracker.services.storage import (
    AuditStorageInterface,
    CorruptDataError,
    FileKeyValueStore,
    InMemoryAuditStorage,
    InMemoryKeyValueStore,
    JsonLinesAuditStorage,
    KeyValueStoreInterface,
    StorageError,
)

__all__ = [
    "AuditStorageInterface",
    "CorruptDataError",
    "FileKeyValueStore",
    "InMemoryAuditStorage",
    "InMemoryKeyValueStore",
    "JsonLinesAuditStorage",
    "KeyValueStoreInterface",
    "StorageError",
]
