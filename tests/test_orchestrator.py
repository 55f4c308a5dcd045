"""Integration tests for the tracker flows and component wiring."""

from decimal import Decimal

import pytest

from finance_tracker.config import Settings
from finance_tracker.orchestrator import TrackerFlow, create_app_components
from finance_tracker.reports import EXCEL_MIME_TYPE
from finance_tracker.views import DashboardView, ExportFormat, ReportsView, ViewMode


@pytest.fixture
def memory_settings(monkeypatch, tmp_path):
    monkeypatch.setenv("STORAGE_BACKEND", "memory")
    monkeypatch.setenv("STORAGE_STATE_DIR", str(tmp_path))
    return Settings()


@pytest.fixture
def file_settings(monkeypatch, tmp_path):
    monkeypatch.setenv("STORAGE_BACKEND", "file")
    monkeypatch.setenv("STORAGE_STATE_DIR", str(tmp_path / "state"))
    return Settings()


@pytest.fixture
def flow(transactions, audit_logger):
    return TrackerFlow(
        transactions=transactions,
        settings=Settings(),
        audit_logger=audit_logger,
    )


class TestSubmitTransaction:

    def test_valid_submission(self, flow):
        transaction, result, message = flow.submit_transaction("income", "1000", "Salary")
        assert transaction is not None
        assert result.is_valid
        assert message == "Transaction added."
        assert flow.transactions.list() == [transaction]

    def test_invalid_submission_not_stored(self, flow, audited):
        transaction, result, message = flow.submit_transaction("expense", "abc", "", None)
        assert transaction is None
        assert not result.is_valid
        assert "Please enter a description" in message
        assert len(flow.transactions) == 0
        assert audited()[-1] == "transaction_rejected"

    def test_balance_card_follows_submissions(self, flow):
        flow.submit_transaction("income", "1000", "Salary")
        flow.submit_transaction("expense", "150", "Groceries", "food")
        card = flow.balance_card()
        assert card.balance == Decimal("850")
        assert card.low_balance


class TestViewsAndExports:

    def test_view_dispatch(self, flow):
        assert isinstance(flow.view(ViewMode.DASHBOARD), DashboardView)
        assert isinstance(flow.view("reports"), ReportsView)

    def test_switching_views_does_not_change_data(self, flow):
        flow.submit_transaction("income", "10", "a")
        before = flow.transactions.list()
        for mode in ViewMode:
            flow.view(mode)
        assert flow.transactions.list() == before

    def test_export_is_audited(self, flow, audited):
        flow.submit_transaction("income", "10", "a")
        report = flow.export(ExportFormat.EXCEL)
        assert report.mime_type == EXCEL_MIME_TYPE
        assert report.row_count == 1
        assert audited()[-1] == "report_exported"

    def test_export_accepts_string_format(self, flow):
        assert flow.export("pdf").content.startswith(b"%PDF")


class TestCreateAppComponents:

    def test_demo_user_seeded(self, memory_settings):
        auth, flow, _ = create_app_components(settings=memory_settings)
        assert auth.login("teste@teste.com", "123456")
        assert auth.get_current_user().email == "teste@teste.com"

    def test_demo_user_can_be_disabled(self, memory_settings, monkeypatch):
        monkeypatch.setenv("AUTH_SEED_DEMO_USER", "false")
        auth, _, _ = create_app_components(settings=Settings())
        assert auth.users == ()

    def test_memory_backend_writes_nothing(self, memory_settings, tmp_path):
        auth, flow, _ = create_app_components(settings=memory_settings)
        flow.submit_transaction("income", "10", "a")
        assert list(tmp_path.iterdir()) == []

    def test_file_backend_survives_reload(self, file_settings, tmp_path):
        auth, flow, _ = create_app_components(settings=file_settings)
        auth.register("Ana", "ana@example.com", "pw")
        flow.submit_transaction("income", "1000", "Salary")

        auth2, flow2, audit_logger = create_app_components(settings=file_settings)
        assert [t.description for t in flow2.transactions.list()] == ["Salary"]
        # The session and cached user survive; the in-memory registry does not
        assert auth2.is_authenticated()
        assert auth2.get_cached_user().email == "ana@example.com"
        assert [u.email for u in auth2.users] == ["teste@teste.com"]
        assert (tmp_path / "state" / "audit.jsonl").exists()

    def test_use_storage_false_forces_memory(self, file_settings, tmp_path):
        _, flow, _ = create_app_components(use_storage=False, settings=file_settings)
        flow.submit_transaction("income", "10", "a")
        assert not (tmp_path / "state").exists()
