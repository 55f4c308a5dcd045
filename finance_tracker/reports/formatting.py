"""
Display Formatting

Shared by the views and both exporters so a transaction reads the same
on screen, in the PDF and in the spreadsheet.

Row shape: [kind label, description, category label or "-", amount, date]
"""

from datetime import datetime
from html import escape
from decimal import Decimal
from typing import Optional

from finance_tracker.config import ReportSettings, get_settings
from finance_tracker.models.transaction import Transaction


REPORT_HEADERS = ["Type", "Description", "Category", "Amount", "Date"]
CATEGORY_PLACEHOLDER = "-"


def format_currency(amount: Decimal, symbol: str = "R$") -> str:
    """e.g. Decimal("1234.5") -> "R$ 1,234.50"."""
    return f"{symbol} {amount:,.2f}"


def format_signed_currency(transaction: Transaction, symbol: str = "R$") -> str:
    """Amount prefixed with + for income and - for expense."""
    sign = "+" if transaction.is_income else "-"
    return f"{sign} {format_currency(transaction.amount, symbol)}"


def format_date(value: datetime, date_format: str = "%d/%m/%Y") -> str:
    """Render a timestamp in the local timezone."""
    if value.tzinfo is not None:
        value = value.astimezone()
    return value.strftime(date_format)


def markdown_safe(text: str) -> str:
    """
    Make text inert inside st.markdown(..., unsafe_allow_html=True).

    HTML is escaped, and "$" becomes an entity so two amounts on one line
    are not read as a LaTeX span.
    """
    return escape(text).replace("$", "&#36;")


def transaction_row(
    transaction: Transaction,
    settings: Optional[ReportSettings] = None,
) -> list[str]:
    """One report row for a transaction."""
    settings = settings or get_settings().report
    return [
        transaction.type.label,
        transaction.description,
        transaction.category.label if transaction.category else CATEGORY_PLACEHOLDER,
        format_currency(transaction.amount, settings.currency_symbol),
        format_date(transaction.date, settings.date_format),
    ]
