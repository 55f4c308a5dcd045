"""
Transaction Store

Holds the ordered list of transactions in memory and mirrors the full
list to the key-value store after every change.

DESIGN DECISION: Append order is chronological order. Transactions are
never edited or deleted, so the list only grows.

Persisted data that fails to parse is treated as absent: the store starts
empty and a warning is audited. A broken cookie must never lock the user
out of the app.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, Union

from pydantic import ValidationError

from finance_tracker.audit import AuditLogger
from finance_tracker.config import StorageSettings, get_settings
from finance_tracker.models.transaction import (
    ExpenseCategory,
    FinancialSummary,
    Transaction,
    TransactionType,
)
from finance_tracker.reports.summary import summarize
from finance_tracker.services.clock import Clock, system_clock, timestamp_id
from finance_tracker.services.storage import CorruptDataError, KeyValueStoreInterface


class TransactionStore:
    """
    Ordered, append-only collection of transactions.

    Aggregates are never cached; summary() rescans the list on every call.
    """

    def __init__(
        self,
        store: KeyValueStoreInterface,
        storage_settings: Optional[StorageSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
        clock: Clock = system_clock,
        low_balance_threshold: Optional[float] = None,
    ):
        self._store = store
        self._settings = storage_settings or get_settings().storage
        self._audit_logger = audit_logger
        self._clock = clock
        self._low_balance_threshold = (
            low_balance_threshold
            if low_balance_threshold is not None
            else get_settings().app.low_balance_threshold
        )
        self._transactions: list[Transaction] = self._load()

    def _load(self) -> list[Transaction]:
        """Read the persisted collection, treating anything unparseable as absent."""
        key = self._settings.transactions_key
        try:
            data = self._store.get_json(key)
        except CorruptDataError as e:
            self._state_corrupt(key, str(e))
            return []

        if data is None:
            return []
        if not isinstance(data, list):
            self._state_corrupt(key, "expected a list")
            return []

        try:
            transactions = [Transaction.model_validate(item) for item in data]
        except ValidationError as e:
            self._state_corrupt(key, f"{e.error_count()} validation errors")
            return []

        if self._audit_logger:
            self._audit_logger.log_state_loaded(key=key, record_count=len(transactions))
        return transactions

    def _state_corrupt(self, key: str, message: str) -> None:
        if self._audit_logger:
            self._audit_logger.log_state_corrupt(key=key, error_message=message)

    def _persist(self) -> None:
        self._store.set_json(
            self._settings.transactions_key,
            [t.model_dump(mode="json") for t in self._transactions],
            max_age_seconds=self._settings.cookie_expiry_seconds,
        )

    def add(
        self,
        type: Union[TransactionType, str],
        amount: Union[Decimal, int, float, str],
        description: str,
        category: Optional[Union[ExpenseCategory, str]] = None,
    ) -> Transaction:
        """
        Record a new transaction and persist the full collection.

        Raises:
            pydantic.ValidationError: If the record breaks a model invariant
                (non-positive amount, empty description, category rule)
        """
        if isinstance(amount, float):
            amount = Decimal(str(amount))

        # One reading so the id and the date describe the same instant
        now = self._clock()
        transaction = Transaction(
            id=timestamp_id(lambda: now, {t.id for t in self._transactions}),
            type=type,
            amount=amount,
            description=description,
            category=category,
            date=datetime.fromtimestamp(now, timezone.utc),
        )
        self._transactions.append(transaction)
        self._persist()

        if self._audit_logger:
            self._audit_logger.log_transaction_added(
                transaction_id=transaction.id,
                transaction_type=transaction.type.value,
                amount=str(transaction.amount),
                category=transaction.category.value if transaction.category else None,
            )

        return transaction

    def recent(self, limit: Optional[int] = None) -> list[Transaction]:
        """Transactions newest first, optionally truncated."""
        newest_first = self._transactions[::-1]
        return newest_first[:limit] if limit is not None else newest_first

    def summary(self) -> FinancialSummary:
        return summarize(self._transactions, self._low_balance_threshold)

    def __len__(self) -> int:
        return len(self._transactions)

    # Defined last: the name shadows the builtin inside the class body.
    def list(self) -> list[Transaction]:
        """All transactions in chronological (append) order."""
        return self._transactions[:]
