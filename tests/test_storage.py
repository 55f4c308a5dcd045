"""Tests for the key-value and audit storage backends."""

import json

import pytest

from finance_tracker.audit import AuditLogger
from finance_tracker.config import StorageSettings
from finance_tracker.models.audit import AuditEventBuilder
from finance_tracker.services.storage import (
    AuditStorageInterface,
    CorruptDataError,
    FileKeyValueStore,
    InMemoryAuditStorage,
    InMemoryKeyValueStore,
    JsonLinesAuditStorage,
)
from finance_tracker.services.transactions import TransactionStore


@pytest.fixture(params=["memory", "file"])
def kv_store(request, clock, tmp_path):
    """Both backends must behave identically."""
    if request.param == "memory":
        return InMemoryKeyValueStore(clock=clock)
    return FileKeyValueStore(tmp_path / "state", clock=clock)


class TestKeyValueStore:

    def test_missing_key(self, kv_store):
        assert kv_store.get("nope") is None

    def test_set_and_get(self, kv_store):
        kv_store.set("k", "v")
        assert kv_store.get("k") == "v"

    def test_overwrite(self, kv_store):
        kv_store.set("k", "one")
        kv_store.set("k", "two")
        assert kv_store.get("k") == "two"

    def test_delete(self, kv_store):
        kv_store.set("k", "v")
        kv_store.delete("k")
        kv_store.delete("never-set")
        assert kv_store.get("k") is None

    def test_expiry(self, kv_store, clock):
        kv_store.set("k", "v", max_age_seconds=60)
        clock.advance(59)
        assert kv_store.get("k") == "v"
        clock.advance(1)
        assert kv_store.get("k") is None

    def test_no_expiry_by_default(self, kv_store, clock):
        kv_store.set("k", "v")
        clock.advance(10 * 365 * 24 * 60 * 60)
        assert kv_store.get("k") == "v"

    def test_json_helpers(self, kv_store):
        kv_store.set_json("k", {"a": [1, 2]})
        assert kv_store.get_json("k") == {"a": [1, 2]}
        assert kv_store.get_json("missing") is None

    def test_get_json_corrupt(self, kv_store):
        kv_store.set("k", "{oops")
        with pytest.raises(CorruptDataError) as exc_info:
            kv_store.get_json("k")
        assert exc_info.value.key == "k"


class TestFileKeyValueStore:

    def test_survives_new_instance(self, tmp_path, clock):
        FileKeyValueStore(tmp_path, clock=clock).set("k", "v")
        assert FileKeyValueStore(tmp_path, clock=clock).get("k") == "v"

    def test_jar_layout(self, tmp_path, clock):
        store = FileKeyValueStore(tmp_path, clock=clock)
        store.set("k", "v", max_age_seconds=10)
        jar = json.loads(store.path.read_text())
        assert jar == {"k": {"value": "v", "expires_at": clock() + 10}}

    def test_unreadable_jar_is_empty(self, tmp_path, clock):
        store = FileKeyValueStore(tmp_path, clock=clock)
        store.path.write_text("not json")
        assert store.get("k") is None
        store.set("k", "v")
        assert store.get("k") == "v"

    @pytest.mark.parametrize("expires_at", ["tomorrow", [1], {"at": 1}, True])
    def test_tampered_expiry_treated_as_absent(self, tmp_path, clock, expires_at):
        store = FileKeyValueStore(tmp_path, clock=clock)
        store.path.write_text(json.dumps({
            "transactions": {"value": "[]", "expires_at": expires_at},
            "user": {"value": "kept", "expires_at": None},
        }))

        assert store.get("transactions") is None
        assert store.get("user") == "kept"
        assert "transactions" not in json.loads(store.path.read_text())

    def test_tampered_expiry_does_not_block_transaction_load(self, tmp_path, clock):
        store = FileKeyValueStore(tmp_path, clock=clock)
        store.path.write_text(json.dumps({
            "transactions": {"value": "[]", "expires_at": "tomorrow"},
        }))

        transactions = TransactionStore(store, StorageSettings(backend="file"), clock=clock)
        assert len(transactions) == 0
        transactions.add("income", "10", "Salary")
        assert len(TransactionStore(store, StorageSettings(backend="file"), clock=clock)) == 1

    def test_expired_entries_are_purged(self, tmp_path, clock):
        store = FileKeyValueStore(tmp_path, clock=clock)
        store.set("old", "v", max_age_seconds=1)
        store.set("keep", "v")
        clock.advance(2)
        store.get("keep")
        assert "old" not in json.loads(store.path.read_text())


class TestAuditStorage:

    def test_memory_newest_first(self):
        storage = InMemoryAuditStorage()
        storage.append_event(AuditEventBuilder.login_failed("a@b.com"))
        storage.append_event(AuditEventBuilder.logout(None))
        assert [e["event_type"] for e in storage.get_recent_events()] == ["logout", "login_failed"]

    def test_memory_is_bounded(self):
        storage = InMemoryAuditStorage(max_events=2)
        for _ in range(5):
            storage.append_event(AuditEventBuilder.logout(None))
        assert len(storage.get_recent_events()) == 2

    def test_json_lines(self, tmp_path):
        storage = JsonLinesAuditStorage(tmp_path)
        storage.append_event(AuditEventBuilder.login_failed("a@b.com"))
        storage.append_event(AuditEventBuilder.logout("1"))

        events = storage.get_recent_events(limit=1)
        assert [e["event_type"] for e in events] == ["logout"]
        assert len((tmp_path / "audit.jsonl").read_text().splitlines()) == 2

    def test_json_lines_missing_file(self, tmp_path):
        assert JsonLinesAuditStorage(tmp_path / "nowhere").get_recent_events() == []


class FailingAuditStorage(AuditStorageInterface):

    def append_event(self, event):
        raise OSError("disk full")

    def get_recent_events(self, limit=100):
        return []


class TestAuditLogger:

    def test_persists_event(self):
        storage = InMemoryAuditStorage()
        logger = AuditLogger(storage)
        logger.log_transaction_added("1", "expense", "10.00", "food")

        event = storage.get_recent_events()[0]
        assert event["event_type"] == "transaction_added"
        assert event["details"]["category"] == "food"

    def test_storage_failure_is_swallowed(self):
        logger = AuditLogger(FailingAuditStorage())
        assert logger.log(AuditEventBuilder.logout(None)) is False

    def test_without_storage(self):
        assert AuditLogger().log(AuditEventBuilder.logout(None)) is True

    def test_log_error(self):
        storage = InMemoryAuditStorage()
        AuditLogger(storage).log_error("export_failed", "boom", {"format": "pdf"})

        event = storage.get_recent_events()[0]
        assert event["event_type"] == "system_error"
        assert event["severity"] == "error"
        assert event["details"] == {"format": "pdf"}
