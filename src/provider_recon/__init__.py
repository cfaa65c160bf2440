"""Reconcile internal transaction exports against payment provider statements."""

__version__ = "0.1.0"

from .models.transaction import (  # noqa: E402
    Transaction,
    MatchedPair,
    ReconciliationResult,
    ReconciliationSummary,
)
from .parsers.csv_parser import TransactionCSVParser, parse_csv  # noqa: E402
from .matching.engine import ReconciliationEngine, reconcile_transactions  # noqa: E402

__all__ = [
    "Transaction",
    "MatchedPair",
    "ReconciliationResult",
    "ReconciliationSummary",
    "TransactionCSVParser",
    "parse_csv",
    "ReconciliationEngine",
    "reconcile_transactions",
]
