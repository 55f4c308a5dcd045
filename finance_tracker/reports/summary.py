"""
Summary Calculations

DESIGN DECISION: Aggregates are computed by a full linear scan every time.
There is no incremental bookkeeping to drift out of sync, and the data set
is one person's transactions.
"""

from decimal import Decimal
from typing import Iterable, Union

from finance_tracker.models.transaction import (
    CategoryTotal,
    ExpenseCategory,
    FinancialSummary,
    Transaction,
    TransactionType,
)


def total_income(transactions: Iterable[Transaction]) -> Decimal:
    return sum(
        (t.amount for t in transactions if t.type == TransactionType.INCOME),
        Decimal("0"),
    )


def total_expense(transactions: Iterable[Transaction]) -> Decimal:
    return sum(
        (t.amount for t in transactions if t.type == TransactionType.EXPENSE),
        Decimal("0"),
    )


def balance(transactions: Iterable[Transaction]) -> Decimal:
    """Signed sum: +amount for income, -amount for expense."""
    return sum((t.signed_amount for t in transactions), Decimal("0"))


def totals_by_category(transactions: Iterable[Transaction]) -> list[CategoryTotal]:
    """Expense totals for every category, in enum order, zero-filled."""
    totals = {category: Decimal("0") for category in ExpenseCategory}
    for t in transactions:
        if t.type == TransactionType.EXPENSE and t.category is not None:
            totals[t.category] += t.amount
    return [
        CategoryTotal(category=category, total=total)
        for category, total in totals.items()
    ]


def summarize(
    transactions: Iterable[Transaction],
    low_balance_threshold: Union[Decimal, float] = Decimal("1000"),
) -> FinancialSummary:
    """Build the full FinancialSummary for a snapshot of transactions."""
    snapshot = list(transactions)
    income = total_income(snapshot)
    expense = total_expense(snapshot)
    net = balance(snapshot)

    return FinancialSummary(
        total_income=income,
        total_expense=expense,
        balance=net,
        by_category=totals_by_category(snapshot),
        transaction_count=len(snapshot),
        low_balance=net < Decimal(str(low_balance_threshold)),
    )
