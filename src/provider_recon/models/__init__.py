"""Data models for reconciliation."""

from .transaction import (
    Transaction,
    MatchedPair,
    ReconciliationResult,
    ReconciliationSummary,
)

__all__ = [
    "Transaction",
    "MatchedPair",
    "ReconciliationResult",
    "ReconciliationSummary",
]
