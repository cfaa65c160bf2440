"""
End-to-end reconciliation run: parse both inputs, check they are usable,
reconcile and summarise.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional
import logging

from .config import ReconConfig
from .matching.engine import ReconciliationEngine
from .models.transaction import ReconciliationResult, ReconciliationSummary, Transaction
from .parsers.csv_parser import TransactionCSVParser
from .utils.exceptions import EmptyInputError

logger = logging.getLogger(__name__)


@dataclass
class ReconciliationRun:
    """Everything produced by one reconciliation run."""

    internal_transactions: list[Transaction]
    provider_transactions: list[Transaction]
    result: ReconciliationResult
    summary: ReconciliationSummary


def _run(
    internal_transactions: list[Transaction],
    provider_transactions: list[Transaction],
    config: ReconConfig,
    internal_filename: str,
    provider_filename: str,
) -> ReconciliationRun:
    for side, transactions in (
        ("internal", internal_transactions),
        ("provider", provider_transactions),
    ):
        if not transactions:
            logger.error(f"No valid transactions found in {side} input")
            raise EmptyInputError(side)

    start_time = datetime.now()
    engine = ReconciliationEngine(config)
    result = engine.reconcile(internal_transactions, provider_transactions)
    processing_time = (datetime.now() - start_time).total_seconds()

    summary = engine.generate_summary(
        internal_transactions=internal_transactions,
        provider_transactions=provider_transactions,
        result=result,
        internal_filename=internal_filename,
        provider_filename=provider_filename,
        processing_time=processing_time,
    )

    return ReconciliationRun(
        internal_transactions=internal_transactions,
        provider_transactions=provider_transactions,
        result=result,
        summary=summary,
    )


def reconcile_texts(
    internal_text: str,
    provider_text: str,
    config: Optional[ReconConfig] = None,
) -> ReconciliationRun:
    """
    Reconcile two CSV documents already held in memory.

    Raises:
        EmptyInputError: If either side yields no transactions
    """
    config = config or ReconConfig()
    parser = TransactionCSVParser(config)
    return _run(
        parser.parse_text(internal_text),
        parser.parse_text(provider_text),
        config,
        internal_filename="",
        provider_filename="",
    )


def reconcile_files(
    internal_path: Path,
    provider_path: Path,
    config: Optional[ReconConfig] = None,
) -> ReconciliationRun:
    """
    Reconcile an internal export file against a provider statement file.

    Raises:
        TransactionParseError: If either file cannot be read
        EmptyInputError: If either side yields no transactions
    """
    config = config or ReconConfig()
    parser = TransactionCSVParser(config)
    internal_path = Path(internal_path)
    provider_path = Path(provider_path)

    return _run(
        parser.parse_file(internal_path),
        parser.parse_file(provider_path),
        config,
        internal_filename=internal_path.name,
        provider_filename=provider_path.name,
    )
