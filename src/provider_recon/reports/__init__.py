"""Report writers for reconciliation results."""

from .csv_export import export_result, matched_rows, to_csv_text, transaction_rows, write_csv
from .excel_generator import ExcelReportGenerator

__all__ = [
    "ExcelReportGenerator",
    "export_result",
    "matched_rows",
    "to_csv_text",
    "transaction_rows",
    "write_csv",
]
