"""Tests for the PDF and spreadsheet exporters."""

import zipfile
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from io import BytesIO

import pytest
from openpyxl import load_workbook

from finance_tracker.config import ReportSettings
from finance_tracker.models.transaction import ExpenseCategory, Transaction, TransactionType
from finance_tracker.reports import (
    EXCEL_MIME_TYPE,
    PDF_MIME_TYPE,
    REPORT_HEADERS,
    build_excel_report,
    build_pdf_report,
    export_excel,
    export_pdf,
    format_date,
)


START = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def settings():
    return ReportSettings(currency_symbol="R$", date_format="%d/%m/%Y")


@pytest.fixture
def sample():
    return [
        Transaction(
            id="1",
            type=TransactionType.INCOME,
            amount=Decimal("1000"),
            description="Salary",
            date=START,
        ),
        Transaction(
            id="2",
            type=TransactionType.EXPENSE,
            amount=Decimal("150.5"),
            description="Groceries & <snacks>",
            category=ExpenseCategory.FOOD,
            date=START + timedelta(days=1),
        ),
    ]


def read_rows(content: bytes) -> list[tuple]:
    workbook = load_workbook(BytesIO(content))
    return list(workbook.active.iter_rows(values_only=True))


class TestPdfExport:

    def test_produces_pdf(self, sample, settings):
        content = export_pdf(sample, settings)
        assert content.startswith(b"%PDF")

    def test_empty_list(self, settings):
        assert export_pdf([], settings).startswith(b"%PDF")

    def test_many_rows_paginate(self, settings):
        many = [
            Transaction(
                id=str(i),
                type=TransactionType.INCOME,
                amount=Decimal("1"),
                description="x" * 120,
                date=START,
            )
            for i in range(200)
        ]
        assert export_pdf(many, settings).startswith(b"%PDF")

    def test_report_metadata(self, sample, settings):
        report = build_pdf_report(sample, settings)
        assert report.filename == "transactions.pdf"
        assert report.mime_type == PDF_MIME_TYPE
        assert report.row_count == 2
        assert report.size_bytes == len(report.content)


class TestExcelExport:

    def test_header_and_rows(self, sample, settings):
        rows = read_rows(export_excel(sample, settings))
        assert rows[0] == tuple(REPORT_HEADERS)
        assert rows[1] == (
            "Income", "Salary", "-", "R$ 1,000.00", format_date(START, "%d/%m/%Y"),
        )
        assert rows[2][:4] == ("Expense", "Groceries & <snacks>", "Food", "R$ 150.50")

    def test_chronological_order(self, sample, settings):
        rows = read_rows(export_excel(sample[::-1], settings))
        assert [r[1] for r in rows[1:]] == ["Groceries & <snacks>", "Salary"]

    def test_sheet_title(self, sample, settings):
        workbook = load_workbook(BytesIO(export_excel(sample, settings)))
        assert workbook.active.title == "Transactions"

    def test_empty_list_has_header_only(self, settings):
        assert read_rows(export_excel([], settings)) == [tuple(REPORT_HEADERS)]

    def test_formula_like_description_stays_text(self, settings):
        t = Transaction(
            id="1",
            type=TransactionType.INCOME,
            amount=Decimal("1"),
            description="=SUM(A1:A9)",
            date=START,
        )
        content = export_excel([t], settings)
        with zipfile.ZipFile(BytesIO(content)) as archive:
            sheet_xml = archive.read("xl/worksheets/sheet1.xml").decode()
        assert "<f>" not in sheet_xml
        assert read_rows(content)[1][1] == "=SUM(A1:A9)"

    def test_report_metadata(self, sample, settings):
        report = build_excel_report(sample, settings)
        assert report.filename == "transactions.xlsx"
        assert report.mime_type == EXCEL_MIME_TYPE
        assert report.row_count == 2
