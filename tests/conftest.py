"""Shared fixtures: a controllable clock and in-memory components."""

import pytest

from finance_tracker.audit import AuditLogger
from finance_tracker.config import AuthSettings, ReportSettings, StorageSettings
from finance_tracker.services.auth import AuthService
from finance_tracker.services.storage import InMemoryAuditStorage, InMemoryKeyValueStore
from finance_tracker.services.transactions import TransactionStore


START_TIME = 1_700_000_000.0


class FakeClock:
    """Epoch-seconds clock that only moves when told to."""

    def __init__(self, now: float = START_TIME):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return InMemoryKeyValueStore(clock=clock)


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()


@pytest.fixture
def audit_logger(audit_storage):
    return AuditLogger(audit_storage)


@pytest.fixture
def auth_settings():
    return AuthSettings(seed_demo_user=False, token_ttl_hours=24)


@pytest.fixture
def storage_settings():
    return StorageSettings(backend="memory", cookie_expiry_days=7)


@pytest.fixture
def report_settings():
    return ReportSettings(currency_symbol="R$", date_format="%d/%m/%Y", recent_limit=10)


@pytest.fixture
def auth(store, auth_settings, storage_settings, audit_logger, clock):
    return AuthService(
        store=store,
        settings=auth_settings,
        storage_settings=storage_settings,
        audit_logger=audit_logger,
        clock=clock,
    )


@pytest.fixture
def transactions(store, storage_settings, audit_logger, clock):
    return TransactionStore(
        store=store,
        storage_settings=storage_settings,
        audit_logger=audit_logger,
        clock=clock,
        low_balance_threshold=1000,
    )


@pytest.fixture
def audited(audit_storage):
    """Returns a callable listing audited event types, oldest first."""
    def event_types() -> list[str]:
        return [e["event_type"] for e in reversed(audit_storage.get_recent_events(1000))]
    return event_types
