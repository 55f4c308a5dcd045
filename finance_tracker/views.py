"""
View Controller

DESIGN DECISION: There is no state machine here. The active screen is one
of three modes picked directly by the user, and each screen is a pure
function of the current transaction list. The UI only renders what these
view models contain.

Screens:
- DASHBOARD: entry form options + recent transactions feed
- TRANSACTIONS: the full list, newest first
- REPORTS: totals, per-category spending and the export actions

The balance card is shown above every screen.
"""

from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional, Union

from pydantic import BaseModel, Field

from finance_tracker.config import ReportSettings, get_settings
from finance_tracker.models.transaction import (
    ExpenseCategory,
    FinancialSummary,
    Transaction,
    TransactionType,
)
from finance_tracker.reports.formatting import (
    format_currency,
    format_date,
    format_signed_currency,
)
from finance_tracker.reports.summary import summarize


class ViewMode(str, Enum):
    """The three mutually exclusive screens."""
    DASHBOARD = "dashboard"
    TRANSACTIONS = "transactions"
    REPORTS = "reports"

    @property
    def label(self) -> str:
        return self.value.title()


class ExportFormat(str, Enum):
    PDF = "pdf"
    EXCEL = "excel"


# =============================================================================
# VIEW MODELS
# =============================================================================

class Option(BaseModel):
    """A value/label pair for a form control."""
    value: str
    label: str


class TransactionRow(BaseModel):
    """One transaction as displayed in a feed or list."""

    id: str
    is_income: bool
    kind_label: str
    description: str
    category_label: Optional[str] = None
    amount_display: str = Field(..., description="Signed, formatted amount")
    date_display: str


class BalanceCard(BaseModel):
    """Header card shown above every screen."""

    balance: Decimal
    balance_display: str
    low_balance: bool


class FormOptions(BaseModel):
    """Choices offered by the new-transaction form."""

    types: list[Option]
    categories: list[Option]
    default_type: TransactionType = TransactionType.INCOME


class CategoryRow(BaseModel):
    category: ExpenseCategory
    label: str
    total_display: str


class ExportAction(BaseModel):
    format: ExportFormat
    label: str
    filename: str


class DashboardView(BaseModel):
    mode: ViewMode = ViewMode.DASHBOARD
    form: FormOptions
    recent: list[TransactionRow]


class TransactionsView(BaseModel):
    mode: ViewMode = ViewMode.TRANSACTIONS
    rows: list[TransactionRow]


class ReportsView(BaseModel):
    mode: ViewMode = ViewMode.REPORTS
    summary: FinancialSummary
    total_income_display: str
    total_expense_display: str
    balance_display: str
    categories: list[CategoryRow]
    exports: list[ExportAction]


AnyView = Union[DashboardView, TransactionsView, ReportsView]


# =============================================================================
# BUILDERS
# =============================================================================

def to_row(transaction: Transaction, settings: ReportSettings) -> TransactionRow:
    return TransactionRow(
        id=transaction.id,
        is_income=transaction.is_income,
        kind_label=transaction.type.label,
        description=transaction.description,
        category_label=transaction.category.label if transaction.category else None,
        amount_display=format_signed_currency(transaction, settings.currency_symbol),
        date_display=format_date(transaction.date, settings.date_format),
    )


def form_options() -> FormOptions:
    return FormOptions(
        types=[Option(value=t.value, label=t.label) for t in TransactionType],
        categories=[Option(value=c.value, label=c.label) for c in ExpenseCategory],
    )


def build_balance_card(
    transactions: Iterable[Transaction],
    settings: Optional[ReportSettings] = None,
    low_balance_threshold: Optional[float] = None,
) -> BalanceCard:
    settings = settings or get_settings().report
    if low_balance_threshold is None:
        low_balance_threshold = get_settings().app.low_balance_threshold
    summary = summarize(transactions, low_balance_threshold)
    return BalanceCard(
        balance=summary.balance,
        balance_display=format_currency(summary.balance, settings.currency_symbol),
        low_balance=summary.low_balance,
    )


def build_dashboard(
    transactions: list[Transaction],
    settings: ReportSettings,
) -> DashboardView:
    newest_first = transactions[::-1][:settings.recent_limit]
    return DashboardView(
        form=form_options(),
        recent=[to_row(t, settings) for t in newest_first],
    )


def build_transactions(
    transactions: list[Transaction],
    settings: ReportSettings,
) -> TransactionsView:
    return TransactionsView(
        rows=[to_row(t, settings) for t in reversed(transactions)],
    )


def build_reports(
    transactions: list[Transaction],
    settings: ReportSettings,
    low_balance_threshold: float,
) -> ReportsView:
    summary = summarize(transactions, low_balance_threshold)
    symbol = settings.currency_symbol
    return ReportsView(
        summary=summary,
        total_income_display=format_currency(summary.total_income, symbol),
        total_expense_display=format_currency(summary.total_expense, symbol),
        balance_display=format_currency(summary.balance, symbol),
        categories=[
            CategoryRow(
                category=entry.category,
                label=entry.label,
                total_display=format_currency(entry.total, symbol),
            )
            for entry in summary.by_category
        ],
        exports=[
            ExportAction(format=ExportFormat.PDF, label="Export to PDF", filename=settings.pdf_filename),
            ExportAction(format=ExportFormat.EXCEL, label="Export to Excel", filename=settings.excel_filename),
        ],
    )


def build_view(
    mode: Union[ViewMode, str],
    transactions: Iterable[Transaction],
    settings: Optional[ReportSettings] = None,
    low_balance_threshold: Optional[float] = None,
) -> AnyView:
    """
    Derive the view model for a screen.

    Args:
        mode: Which screen is active
        transactions: Snapshot in chronological order
        settings: Formatting settings (defaults to global settings)
        low_balance_threshold: Alert threshold (defaults to global settings)
    """
    settings = settings or get_settings().report
    if low_balance_threshold is None:
        low_balance_threshold = get_settings().app.low_balance_threshold
    snapshot = list(transactions)
    mode = ViewMode(mode)

    if mode == ViewMode.TRANSACTIONS:
        return build_transactions(snapshot, settings)
    elif mode == ViewMode.REPORTS:
        return build_reports(snapshot, settings, low_balance_threshold)
    return build_dashboard(snapshot, settings)
