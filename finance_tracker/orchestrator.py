"""
Main Orchestrator for Finance Tracker

This module ties together all the components and defines the flows the
UI drives:
1. Add transaction (form -> validate -> store -> persist)
2. Derive a screen (store snapshot -> view model)
3. Export (store snapshot -> file bytes)

DESIGN DECISION: The UI never touches the stores directly. Every user
action goes through TrackerFlow so it is validated and audited the
same way regardless of which screen triggered it.
"""

from pathlib import Path
from typing import Optional, Union

import structlog

from finance_tracker.audit import AuditLogger
from finance_tracker.config import Settings, get_settings
from finance_tracker.models.transaction import (
    ExpenseCategory,
    Transaction,
    TransactionType,
    ValidationResult,
)
from finance_tracker.reports.export import (
    ExportedReport,
    build_excel_report,
    build_pdf_report,
)
from finance_tracker.services.auth import AuthService
from finance_tracker.services.clock import Clock, system_clock
from finance_tracker.services.storage import (
    AuditStorageInterface,
    FileKeyValueStore,
    InMemoryAuditStorage,
    InMemoryKeyValueStore,
    JsonLinesAuditStorage,
    KeyValueStoreInterface,
    StorageError,
)
from finance_tracker.services.transactions import TransactionStore
from finance_tracker.validation import TransactionFormValidator
from finance_tracker.views import (
    AnyView,
    BalanceCard,
    ExportFormat,
    ViewMode,
    build_balance_card,
    build_view,
)


logger = structlog.get_logger(__name__)


class TrackerFlow:
    """
    Orchestrates everything a signed-in user can do.

    Flow for a new transaction:
    1. Validate raw form input
    2. Record it in the TransactionStore (persists the full list)
    3. Screens re-derive their totals on the next render
    """

    def __init__(
        self,
        transactions: TransactionStore,
        settings: Optional[Settings] = None,
        validator: Optional[TransactionFormValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._transactions = transactions
        self._settings = settings or get_settings()
        self._validator = validator or TransactionFormValidator()
        self._audit_logger = audit_logger

    @property
    def transactions(self) -> TransactionStore:
        return self._transactions

    def submit_transaction(
        self,
        transaction_type: Union[TransactionType, str],
        amount_text: Union[str, float, None],
        description: Optional[str],
        category: Union[ExpenseCategory, str, None] = None,
    ) -> tuple[Optional[Transaction], ValidationResult, str]:
        """
        Validate and record one form submission.

        Returns:
            (transaction or None, validation_result, user_message)
        """
        result = self._validator.validate(
            transaction_type=transaction_type,
            amount_text=amount_text,
            description=description,
            category=category,
        )
        message = self._validator.get_user_friendly_summary(result)

        if not result.is_valid:
            if self._audit_logger:
                self._audit_logger.log_transaction_rejected(
                    issues=[
                        {"field": i.field, "type": i.issue_type, "message": i.message}
                        for i in result.issues
                    ]
                )
            return None, result, message

        transaction = self._transactions.add(
            type=result.type,
            amount=result.amount,
            description=result.description,
            category=result.category,
        )
        return transaction, result, message

    def view(self, mode: Union[ViewMode, str]) -> AnyView:
        """Derive the view model for the active screen."""
        return build_view(
            mode,
            self._transactions.list(),
            settings=self._settings.report,
            low_balance_threshold=self._settings.app.low_balance_threshold,
        )

    def balance_card(self) -> BalanceCard:
        return build_balance_card(
            self._transactions.list(),
            settings=self._settings.report,
            low_balance_threshold=self._settings.app.low_balance_threshold,
        )

    def export(self, export_format: Union[ExportFormat, str]) -> ExportedReport:
        """
        Produce a report file from the current snapshot.

        Library errors propagate to the caller.
        """
        export_format = ExportFormat(export_format)
        snapshot = self._transactions.list()

        if export_format == ExportFormat.PDF:
            report = build_pdf_report(snapshot, self._settings.report)
        else:
            report = build_excel_report(snapshot, self._settings.report)

        if self._audit_logger:
            self._audit_logger.log_report_exported(
                report_format=export_format.value,
                filename=report.filename,
                row_count=report.row_count,
                size_bytes=report.size_bytes,
            )
        return report


def create_stores(
    backend: str,
    state_dir: Path,
    clock: Clock = system_clock,
) -> tuple[KeyValueStoreInterface, AuditStorageInterface]:
    """Build the key-value store and audit sink for a backend name."""
    if backend == "file":
        return (
            FileKeyValueStore(state_dir, clock=clock),
            JsonLinesAuditStorage(state_dir),
        )
    return InMemoryKeyValueStore(clock=clock), InMemoryAuditStorage()


def create_app_components(
    use_storage: bool = True,
    settings: Optional[Settings] = None,
    clock: Clock = system_clock,
) -> tuple[AuthService, TrackerFlow, AuditLogger]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to use the configured storage backend.
                    Set to False for an in-memory-only setup.
        settings: Settings to use (defaults to global settings)
        clock: Epoch-seconds clock shared by all components

    Returns:
        (auth_service, tracker_flow, audit_logger)
    """
    settings = settings or get_settings()
    storage_settings = settings.storage
    auth_settings = settings.auth

    backend = storage_settings.backend if use_storage else "memory"
    try:
        store, audit_storage = create_stores(backend, storage_settings.state_dir, clock)
        # Touch the jar once so a broken state dir fails here, not mid-request
        store.get(storage_settings.token_key)
    except StorageError as e:
        logger.warning("storage_unavailable", backend=backend, error=str(e))
        store, audit_storage = create_stores("memory", storage_settings.state_dir, clock)

    audit_logger = AuditLogger(audit_storage)

    auth = AuthService(
        store=store,
        settings=auth_settings,
        storage_settings=storage_settings,
        audit_logger=audit_logger,
        clock=clock,
    )
    if auth_settings.seed_demo_user:
        auth.add_user(
            name=auth_settings.demo_name,
            email=auth_settings.demo_email,
            password=auth_settings.demo_password,
        )

    transactions = TransactionStore(
        store=store,
        storage_settings=storage_settings,
        audit_logger=audit_logger,
        clock=clock,
        low_balance_threshold=settings.app.low_balance_threshold,
    )

    flow = TrackerFlow(
        transactions=transactions,
        settings=settings,
        audit_logger=audit_logger,
    )

    return auth, flow, audit_logger
