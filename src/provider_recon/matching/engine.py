"""
Reference-keyed reconciliation engine.
Pairs internal records with provider records and flags field discrepancies.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
import logging

from ..models.transaction import (
    Transaction,
    MatchedPair,
    ReconciliationResult,
    ReconciliationSummary,
    format_amount,
)
from ..config import ReconConfig

logger = logging.getLogger(__name__)


def _index_by_reference(transactions: list[Transaction]) -> dict[str, Transaction]:
    # Later records overwrite earlier ones sharing a reference
    return {txn.reference: txn for txn in transactions}


class ReconciliationEngine:
    """
    Matches internal transactions to provider transactions by reference.

    Matching is exact on the reference; amount and status are compared
    afterwards and reported as mismatches rather than preventing a match.
    """

    def __init__(self, config: Optional[ReconConfig] = None):
        """
        Initialize the reconciliation engine.

        Args:
            config: Application configuration
        """
        self.config = config or ReconConfig()
        matching_config = self.config.matching
        self.amount_tolerance = Decimal(str(matching_config.amount_tolerance))
        self.status_case_sensitive = matching_config.status_case_sensitive

    def reconcile(
        self,
        internal_transactions: list[Transaction],
        provider_transactions: list[Transaction],
    ) -> ReconciliationResult:
        """
        Perform reconciliation between internal and provider transactions.

        Every internal record lands in ``matched`` or ``internal_only``.
        Duplicate references are all paired against the last provider
        record carrying that reference.

        Args:
            internal_transactions: Records from the internal export
            provider_transactions: Records from the provider statement

        Returns:
            Reconciliation result with matched, internal-only and
            provider-only groups
        """
        logger.info(
            f"Starting reconciliation: {len(internal_transactions)} internal txns, "
            f"{len(provider_transactions)} provider txns"
        )

        provider_by_ref = _index_by_reference(provider_transactions)
        internal_by_ref = _index_by_reference(internal_transactions)

        result = ReconciliationResult()

        for internal_txn in internal_transactions:
            provider_txn = provider_by_ref.get(internal_txn.reference)
            if provider_txn is None:
                result.internal_only.append(internal_txn)
                continue

            result.matched.append(
                MatchedPair(
                    internal=internal_txn,
                    provider=provider_txn,
                    mismatches=self.compare(internal_txn, provider_txn),
                )
            )

        for provider_txn in provider_transactions:
            if provider_txn.reference not in internal_by_ref:
                result.provider_only.append(provider_txn)

        logger.info(
            f"Reconciliation complete: {len(result.matched)} matched "
            f"({len(result.mismatched)} with mismatches), "
            f"{len(result.internal_only)} internal-only, "
            f"{len(result.provider_only)} provider-only"
        )

        return result

    def compare(self, internal_txn: Transaction, provider_txn: Transaction) -> list[str]:
        """
        Describe the differences between two records sharing a reference.

        Args:
            internal_txn: Internal record
            provider_txn: Provider record

        Returns:
            Mismatch messages, empty for a clean match
        """
        mismatches: list[str] = []

        if abs(internal_txn.amount - provider_txn.amount) > self.amount_tolerance:
            mismatches.append(
                f"Amount: Internal {format_amount(internal_txn.amount)} "
                f"vs Provider {format_amount(provider_txn.amount)}"
            )

        internal_status = internal_txn.status
        provider_status = provider_txn.status
        if not self.status_case_sensitive:
            internal_status = internal_status.lower()
            provider_status = provider_status.lower()
        if internal_status != provider_status:
            mismatches.append(
                f'Status: Internal "{internal_txn.status}" '
                f'vs Provider "{provider_txn.status}"'
            )

        return mismatches

    def generate_summary(
        self,
        internal_transactions: list[Transaction],
        provider_transactions: list[Transaction],
        result: ReconciliationResult,
        internal_filename: str = "",
        provider_filename: str = "",
        processing_time: float = 0.0,
    ) -> ReconciliationSummary:
        """
        Generate a summary of the reconciliation results.

        Args:
            internal_transactions: All internal transactions
            provider_transactions: All provider transactions
            result: Reconciliation result
            internal_filename: Name of the internal export file
            provider_filename: Name of the provider statement file
            processing_time: Time taken in seconds

        Returns:
            Reconciliation summary object
        """
        return ReconciliationSummary(
            internal_filename=internal_filename,
            provider_filename=provider_filename,
            reconciliation_date=datetime.now(),
            total_internal_transactions=len(internal_transactions),
            total_provider_transactions=len(provider_transactions),
            matched_count=len(result.matched),
            mismatched_count=len(result.mismatched),
            internal_only_count=len(result.internal_only),
            provider_only_count=len(result.provider_only),
            processing_time_seconds=processing_time,
            config_file_used=self.config.config_file_path,
        )


def reconcile_transactions(
    internal_transactions: list[Transaction],
    provider_transactions: list[Transaction],
    config: Optional[ReconConfig] = None,
) -> ReconciliationResult:
    """Reconcile two record lists with the given (or default) configuration."""
    return ReconciliationEngine(config).reconcile(
        internal_transactions, provider_transactions
    )
