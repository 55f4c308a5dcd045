"""
Report Exporters

Two independent, stateless serializers over a snapshot of transactions:
1. PDF - a paginated table (reportlab platypus)
2. Excel - a single-sheet workbook (openpyxl)

Both emit the same row shape in chronological order and return the file
as bytes; offering it as a download is the caller's job.

Errors raised by the underlying libraries propagate unchanged.
"""

from io import BytesIO
from typing import Iterable, Optional
from xml.sax.saxutils import escape

from openpyxl import Workbook
from openpyxl.styles import Font
from pydantic import BaseModel, Field
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from finance_tracker.config import ReportSettings, get_settings
from finance_tracker.models.transaction import Transaction
from finance_tracker.reports.formatting import (
    REPORT_HEADERS,
    format_currency,
    transaction_row,
)
from finance_tracker.reports.summary import summarize


REPORT_TITLE = "Transactions"

PDF_MIME_TYPE = "application/pdf"
EXCEL_MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class ExportedReport(BaseModel):
    """A generated report file, ready to be offered as a download."""

    filename: str = Field(..., min_length=1)
    mime_type: str
    content: bytes
    row_count: int = Field(ge=0)

    @property
    def size_bytes(self) -> int:
        return len(self.content)


# =============================================================================
# PDF
# =============================================================================

def _pdf_table_style() -> TableStyle:
    return TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#2563eb")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("ALIGN", (3, 1), (3, -1), "RIGHT"),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#f3f4f6")]),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.HexColor("#d1d5db")),
    ])


def export_pdf(
    transactions: Iterable[Transaction],
    settings: Optional[ReportSettings] = None,
) -> bytes:
    """
    Render transactions as a paginated A4 table.

    The header row repeats on every page. A totals line follows the table.
    """
    settings = settings or get_settings().report
    snapshot = list(transactions)

    styles = getSampleStyleSheet()
    cell_style = styles["BodyText"]
    cell_style.fontSize = 9
    cell_style.leading = 11

    data: list[list] = [REPORT_HEADERS]
    for transaction in snapshot:
        row = transaction_row(transaction, settings)
        # Wrap long descriptions inside the cell
        row[1] = Paragraph(escape(row[1]), cell_style)
        data.append(row)

    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        title=REPORT_TITLE,
        leftMargin=15 * mm,
        rightMargin=15 * mm,
        topMargin=15 * mm,
        bottomMargin=15 * mm,
    )

    table = Table(
        data,
        repeatRows=1,
        colWidths=[22 * mm, 68 * mm, 30 * mm, 35 * mm, 25 * mm],
    )
    table.setStyle(_pdf_table_style())

    summary = summarize(snapshot)
    symbol = settings.currency_symbol
    totals = "&nbsp;&nbsp;&nbsp;".join(
        escape(f"{label}: {format_currency(value, symbol)}")
        for label, value in (
            ("Income", summary.total_income),
            ("Expenses", summary.total_expense),
            ("Balance", summary.balance),
        )
    )

    story = [
        Paragraph(REPORT_TITLE, styles["Title"]),
        Spacer(1, 4 * mm),
        table,
        Spacer(1, 6 * mm),
        Paragraph(totals, styles["Normal"]),
    ]
    doc.build(story)
    return buffer.getvalue()


# =============================================================================
# EXCEL
# =============================================================================

def export_excel(
    transactions: Iterable[Transaction],
    settings: Optional[ReportSettings] = None,
) -> bytes:
    """Render transactions as a single-sheet workbook."""
    settings = settings or get_settings().report

    workbook = Workbook()
    sheet = workbook.active
    sheet.title = REPORT_TITLE

    sheet.append(REPORT_HEADERS)
    for cell in sheet[1]:
        cell.font = Font(bold=True)

    for transaction in transactions:
        sheet.append(transaction_row(transaction, settings))
        description_cell = sheet.cell(row=sheet.max_row, column=2)
        # Free text starting with "=" must stay text, not become a formula
        if description_cell.data_type == "f":
            description_cell.data_type = "s"

    for column, width in zip("ABCDE", (12, 40, 16, 16, 12)):
        sheet.column_dimensions[column].width = width
    sheet.freeze_panes = "A2"

    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def build_pdf_report(
    transactions: Iterable[Transaction],
    settings: Optional[ReportSettings] = None,
) -> ExportedReport:
    settings = settings or get_settings().report
    snapshot = list(transactions)
    return ExportedReport(
        filename=settings.pdf_filename,
        mime_type=PDF_MIME_TYPE,
        content=export_pdf(snapshot, settings),
        row_count=len(snapshot),
    )


def build_excel_report(
    transactions: Iterable[Transaction],
    settings: Optional[ReportSettings] = None,
) -> ExportedReport:
    settings = settings or get_settings().report
    snapshot = list(transactions)
    return ExportedReport(
        filename=settings.excel_filename,
        mime_type=EXCEL_MIME_TYPE,
        content=export_excel(snapshot, settings),
        row_count=len(snapshot),
    )
