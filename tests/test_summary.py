"""Tests for summary calculations."""

from datetime import datetime, timezone
from decimal import Decimal

from finance_tracker.models.transaction import ExpenseCategory, Transaction, TransactionType
from finance_tracker.reports.summary import (
    balance,
    summarize,
    total_expense,
    total_income,
    totals_by_category,
)


def txn(i, type, amount, category=None):
    return Transaction(
        id=str(i),
        type=type,
        amount=Decimal(amount),
        description=f"t{i}",
        category=category,
        date=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


SAMPLE = [
    txn(1, TransactionType.INCOME, "1000"),
    txn(2, TransactionType.EXPENSE, "150", ExpenseCategory.FOOD),
]


class TestTotals:

    def test_empty(self):
        summary = summarize([])
        assert summary.total_income == Decimal("0")
        assert summary.total_expense == Decimal("0")
        assert summary.balance == Decimal("0")
        assert summary.transaction_count == 0

    def test_income_and_expense(self):
        assert total_income(SAMPLE) == Decimal("1000")
        assert total_expense(SAMPLE) == Decimal("150")
        assert balance(SAMPLE) == Decimal("850")

    def test_negative_balance(self):
        data = [txn(1, TransactionType.EXPENSE, "30", ExpenseCategory.BILLS)]
        assert balance(data) == Decimal("-30")

    def test_cents_are_exact(self):
        data = [txn(i, TransactionType.INCOME, "0.10") for i in range(3)]
        assert total_income(data) == Decimal("0.30")


class TestCategories:

    def test_every_category_present_in_order(self):
        totals = totals_by_category(SAMPLE)
        assert [entry.category for entry in totals] == list(ExpenseCategory)

    def test_zero_filled(self):
        summary = summarize(SAMPLE)
        assert summary.category_total(ExpenseCategory.FOOD) == Decimal("150")
        for category in ExpenseCategory:
            if category != ExpenseCategory.FOOD:
                assert summary.category_total(category) == Decimal("0")

    def test_income_never_counted(self):
        data = SAMPLE + [txn(3, TransactionType.INCOME, "500")]
        assert sum(e.total for e in totals_by_category(data)) == Decimal("150")


class TestLowBalance:

    def test_below_threshold(self):
        assert summarize(SAMPLE, low_balance_threshold=1000).low_balance

    def test_at_threshold_is_not_low(self):
        data = [txn(1, TransactionType.INCOME, "1000")]
        assert not summarize(data, low_balance_threshold=1000).low_balance

    def test_custom_threshold(self):
        assert not summarize(SAMPLE, low_balance_threshold=Decimal("500")).low_balance
