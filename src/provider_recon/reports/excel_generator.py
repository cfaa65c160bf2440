"""
Excel report generator for reconciliation results.
Creates multi-sheet workbooks with formatted output.
"""

from pathlib import Path
from typing import Any, Optional
import logging

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE, Cell
from openpyxl.styles import Font, PatternFill, Border, Side
from openpyxl.worksheet.worksheet import Worksheet

from ..models.transaction import (
    Transaction,
    MatchedPair,
    ReconciliationResult,
    ReconciliationSummary,
)
from ..config import ReconConfig
from ..utils.exceptions import ReportGenerationError

logger = logging.getLogger(__name__)

# Style definitions
HEADER_FILL = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
HEADER_FONT = Font(color="FFFFFF", bold=True)
MATCH_FILL = PatternFill(start_color="C6EFCE", end_color="C6EFCE", fill_type="solid")
MISMATCH_FILL = PatternFill(start_color="FFEB9C", end_color="FFEB9C", fill_type="solid")
UNMATCHED_FILL = PatternFill(start_color="FFC7CE", end_color="FFC7CE", fill_type="solid")
THIN_BORDER = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)

TRANSACTION_HEADERS = ["Reference", "Amount", "Status", "Date", "Description"]


class ExcelReportGenerator:
    """Generates Excel reconciliation reports with multiple sheets."""

    def __init__(self, config: Optional[ReconConfig] = None):
        """
        Initialize the report generator.

        Args:
            config: Application configuration
        """
        self.config = config or ReconConfig()
        self.sheet_config = self.config.output.sheets

    def generate_report(
        self,
        summary: ReconciliationSummary,
        result: ReconciliationResult,
        output_path: Path,
    ) -> Path:
        """
        Generate the complete reconciliation report.

        Args:
            summary: Reconciliation summary
            result: Reconciliation result
            output_path: Path for output file

        Returns:
            Path to generated report

        Raises:
            ReportGenerationError: If the workbook cannot be saved
        """
        logger.info(f"Generating Excel report: {output_path}")

        wb = Workbook()

        # Remove default sheet
        if wb.active:
            wb.remove(wb.active)

        sheets = self.sheet_config

        if sheets.summary.enabled:
            self._create_summary_sheet(wb, summary)

        if sheets.matched.enabled:
            self._create_matched_sheet(wb, sheets.matched.name, result.matched)

        if sheets.mismatches.enabled:
            self._create_matched_sheet(wb, sheets.mismatches.name, result.mismatched)

        if sheets.internal_only.enabled:
            self._create_transaction_sheet(
                wb, sheets.internal_only.name, result.internal_only
            )

        if sheets.provider_only.enabled:
            self._create_transaction_sheet(
                wb, sheets.provider_only.name, result.provider_only
            )

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            wb.save(output_path)
        except OSError as e:
            raise ReportGenerationError(f"Failed to save Excel report: {e}") from e

        logger.info(f"Report saved: {output_path}")

        return output_path

    def _create_summary_sheet(
        self, wb: Workbook, summary: ReconciliationSummary
    ) -> None:
        """Create the summary sheet with key metrics."""
        ws = wb.create_sheet(self.sheet_config.summary.name)

        ws["A1"] = "Transaction Reconciliation Summary"
        ws["A1"].font = Font(size=16, bold=True)
        ws.merge_cells("A1:D1")

        ws["A3"] = "File Information"
        ws["A3"].font = Font(bold=True)

        file_info = [
            ("Internal File:", summary.internal_filename or "-"),
            ("Provider File:", summary.provider_filename or "-"),
            (
                "Reconciliation Date:",
                summary.reconciliation_date.strftime("%Y-%m-%d %H:%M:%S"),
            ),
            ("Config File:", summary.config_file_used or "Default"),
        ]

        for i, (label, value) in enumerate(file_info, start=4):
            ws[f"A{i}"] = label
            ws[f"B{i}"] = str(value)

        ws["A9"] = "Transaction Counts"
        ws["A9"].font = Font(bold=True)

        count_data = [
            ("Internal Transactions:", summary.total_internal_transactions),
            ("Provider Transactions:", summary.total_provider_transactions),
            ("Total Transactions:", summary.total_transactions),
            ("Matched:", summary.matched_count),
            ("With Mismatches:", summary.mismatched_count),
            ("Internal Only:", summary.internal_only_count),
            ("Provider Only:", summary.provider_only_count),
            ("Unmatched:", summary.unmatched_count),
        ]

        for i, (label, value) in enumerate(count_data, start=10):
            ws[f"A{i}"] = label
            ws[f"B{i}"] = value

        ws["A19"] = "Match Rate:"
        ws["A19"].font = Font(bold=True)
        ws["B19"] = f"{summary.match_rate:.1f}%"
        ws["A20"] = "Processing Time:"
        ws["B20"] = f"{summary.processing_time_seconds:.2f} seconds"

        ws.column_dimensions["A"].width = 30
        ws.column_dimensions["B"].width = 40

    def _create_matched_sheet(
        self, wb: Workbook, sheet_name: str, pairs: list[MatchedPair]
    ) -> None:
        """Create a sheet listing matched pairs side by side."""
        ws = wb.create_sheet(sheet_name)

        headers = [
            "Reference",
            "Internal Amount",
            "Provider Amount",
            "Internal Status",
            "Provider Status",
            "Mismatches",
        ]
        self._write_headers(ws, headers)

        for row_num, pair in enumerate(pairs, start=2):
            row_data = [
                pair.internal.reference,
                float(pair.internal.amount),
                float(pair.provider.amount),
                pair.internal.status,
                pair.provider.status,
                "; ".join(pair.mismatches),
            ]
            fill = MISMATCH_FILL if pair.has_mismatches else MATCH_FILL
            self._write_row(ws, row_num, row_data, fill)

        self._auto_fit_columns(ws)

    def _create_transaction_sheet(
        self, wb: Workbook, sheet_name: str, transactions: list[Transaction]
    ) -> None:
        """Create a sheet of one-sided transactions, extra columns included."""
        ws = wb.create_sheet(sheet_name)

        extra_headers: list[str] = []
        for txn in transactions:
            for key in txn.extra:
                if key not in extra_headers:
                    extra_headers.append(key)

        self._write_headers(ws, TRANSACTION_HEADERS + extra_headers)

        for row_num, txn in enumerate(transactions, start=2):
            row_data = [
                txn.reference,
                float(txn.amount),
                txn.status,
                txn.date or "",
                txn.description or "",
            ] + [txn.extra.get(key, "") for key in extra_headers]
            self._write_row(ws, row_num, row_data, UNMATCHED_FILL)

        self._auto_fit_columns(ws)

    def _write_cell(self, ws: Worksheet, row: int, col: int, value: Any) -> Cell:
        """Write a value as plain data; file text never becomes a formula."""
        if isinstance(value, str):
            value = ILLEGAL_CHARACTERS_RE.sub("", value)
        cell = ws.cell(row=row, column=col, value=value)
        if isinstance(value, str) and value.startswith("="):
            cell.data_type = "s"
        return cell

    def _write_headers(self, ws: Worksheet, headers: list[str]) -> None:
        for col, header in enumerate(headers, start=1):
            cell = self._write_cell(ws, 1, col, header)
            cell.fill = HEADER_FILL
            cell.font = HEADER_FONT
            cell.border = THIN_BORDER

    def _write_row(
        self, ws: Worksheet, row_num: int, row_data: list[Any], fill: PatternFill
    ) -> None:
        for col, value in enumerate(row_data, start=1):
            cell = self._write_cell(ws, row_num, col, value)
            cell.border = THIN_BORDER
            cell.fill = fill

    def _auto_fit_columns(self, ws: Worksheet) -> None:
        """Auto-fit column widths based on content."""
        for column_cells in ws.columns:
            max_length = 0
            column = column_cells[0].column_letter

            for cell in column_cells:
                if cell.value is not None:
                    max_length = max(max_length, len(str(cell.value)))

            ws.column_dimensions[column].width = min(max_length + 2, 50)
