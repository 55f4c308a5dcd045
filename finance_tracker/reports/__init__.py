"""Reports package: aggregates, formatting and file exporters."""

from finance_tracker.reports.summary import (
    balance,
    summarize,
    total_expense,
    total_income,
    totals_by_category,
)
from finance_tracker.reports.formatting import (
    CATEGORY_PLACEHOLDER,
    REPORT_HEADERS,
    format_currency,
    format_date,
    format_signed_currency,
    markdown_safe,
    transaction_row,
)
from finance_tracker.reports.export import (
    EXCEL_MIME_TYPE,
    PDF_MIME_TYPE,
    ExportedReport,
    build_excel_report,
    build_pdf_report,
    export_excel,
    export_pdf,
)

__all__ = [
    # Aggregates
    "balance",
    "summarize",
    "total_expense",
    "total_income",
    "totals_by_category",
    # Formatting
    "CATEGORY_PLACEHOLDER",
    "REPORT_HEADERS",
    "format_currency",
    "format_date",
    "format_signed_currency",
    "markdown_safe",
    "transaction_row",
    # Exporters
    "EXCEL_MIME_TYPE",
    "PDF_MIME_TYPE",
    "ExportedReport",
    "build_excel_report",
    "build_pdf_report",
    "export_excel",
    "export_pdf",
]
