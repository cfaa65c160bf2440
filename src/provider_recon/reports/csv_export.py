"""
CSV export of reconciliation result groups.

Rows are written with every field wrapped in double quotes and no escaping
of embedded quotes, which is the format downstream spreadsheets were built
against.
"""

from decimal import Decimal
from pathlib import Path
from typing import Any, Optional
import logging

from ..config import ReconConfig
from ..models.transaction import ReconciliationResult, Transaction, format_amount
from ..utils.exceptions import ReportGenerationError

logger = logging.getLogger(__name__)


def _cell(value: Any) -> str:
    # Falsy values (None, "", 0) are written as empty fields
    if not value:
        return ""
    if isinstance(value, Decimal):
        return format_amount(value)
    return str(value)


def matched_rows(result: ReconciliationResult) -> list[dict[str, Any]]:
    """One row per matched pair, with both sides' amount and status."""
    return [
        {
            "transaction_reference": pair.internal.reference,
            "internal_amount": pair.internal.amount,
            "provider_amount": pair.provider.amount,
            "internal_status": pair.internal.status,
            "provider_status": pair.provider.status,
            "mismatches": "; ".join(pair.mismatches),
        }
        for pair in result.matched
    ]


def transaction_rows(transactions: list[Transaction]) -> list[dict[str, Any]]:
    return [txn.to_dict() for txn in transactions]


def to_csv_text(rows: list[dict[str, Any]]) -> str:
    """
    Serialize rows to CSV text.

    The header comes from the keys of the first row; keys missing from
    later rows are written as empty fields.

    Args:
        rows: Row mappings

    Returns:
        CSV text, or an empty string when there are no rows
    """
    if not rows:
        return ""

    headers = list(rows[0].keys())
    lines = [",".join(headers)]
    for row in rows:
        lines.append(",".join(f'"{_cell(row.get(header))}"' for header in headers))

    return "\n".join(lines)


def write_csv(rows: list[dict[str, Any]], output_path: Path) -> Optional[Path]:
    """
    Write rows to a CSV file.

    Args:
        rows: Row mappings
        output_path: Destination file

    Returns:
        The written path, or None when there was nothing to write

    Raises:
        ReportGenerationError: If the file cannot be written
    """
    if not rows:
        logger.debug(f"No rows for {output_path}, skipping")
        return None

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(to_csv_text(rows), encoding="utf-8")
    except OSError as e:
        raise ReportGenerationError(f"Failed to write CSV export: {e}") from e

    logger.info(f"Exported {len(rows)} rows to {output_path}")
    return output_path


def export_result(
    result: ReconciliationResult,
    output_dir: Path,
    config: Optional[ReconConfig] = None,
) -> list[Path]:
    """
    Export the matched, internal-only and provider-only groups.

    Args:
        result: Reconciliation result
        output_dir: Directory to write the files into
        config: Application configuration (for file names)

    Returns:
        Paths of the files written; empty groups produce no file
    """
    csv_config = (config or ReconConfig()).output.csv

    exports = [
        (matched_rows(result), csv_config.matched_filename),
        (transaction_rows(result.internal_only), csv_config.internal_only_filename),
        (transaction_rows(result.provider_only), csv_config.provider_only_filename),
    ]

    written: list[Path] = []
    for rows, filename in exports:
        path = write_csv(rows, output_dir / filename)
        if path is not None:
            written.append(path)

    return written
