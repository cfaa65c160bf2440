"""Data models for reconciliation transactions and results."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional


def format_amount(amount: Decimal) -> str:
    """Render an amount without trailing zeros (``50.00`` -> ``50``)."""
    return format(amount.normalize(), "f")


@dataclass
class Transaction:
    """
    A single transaction record parsed from an internal export or a
    provider statement.

    The three fields used for matching are promoted to attributes; any
    column that does not map to a known role is kept verbatim in ``extra``.
    """

    # Join key between the two sides
    reference: str

    amount: Decimal = Decimal("0")
    status: str = ""

    # Optional recognized attributes
    date: Optional[str] = None
    description: Optional[str] = None

    # Unrecognized columns, keyed by original header
    extra: dict[str, str] = field(default_factory=dict)

    # Header order of the optional and extra keys, as first seen in the file
    field_order: list[str] = field(default_factory=list, compare=False, repr=False)

    def set_field(self, key: str, value: str) -> None:
        """Set ``date``, ``description`` or an extra column, keeping header order."""
        if key not in self.field_order:
            self.field_order.append(key)
        if key in ("date", "description"):
            setattr(self, key, value)
        else:
            self.extra[key] = value

    def to_dict(self) -> dict[str, Any]:
        """Flatten the record into a mapping suitable for export."""
        data: dict[str, Any] = {
            "transaction_reference": self.reference,
            "amount": self.amount,
            "status": self.status,
        }
        optional = {"date": self.date, "description": self.description}
        keys = self.field_order or ["date", "description", *self.extra]
        for key in keys:
            if key in optional:
                if optional[key] is not None:
                    data[key] = optional[key]
            elif key in self.extra:
                data[key] = self.extra[key]
        return data


@dataclass
class MatchedPair:
    """An internal record paired with the provider record sharing its reference."""

    internal: Transaction
    provider: Transaction
    mismatches: list[str] = field(default_factory=list)

    @property
    def has_mismatches(self) -> bool:
        """Check if any field differs between the two sides."""
        return bool(self.mismatches)


@dataclass
class ReconciliationResult:
    """
    Outcome of reconciling internal records against provider records.

    ``matched`` and ``internal_only`` follow internal input order;
    ``provider_only`` follows provider input order.
    """

    matched: list[MatchedPair] = field(default_factory=list)
    internal_only: list[Transaction] = field(default_factory=list)
    provider_only: list[Transaction] = field(default_factory=list)

    @property
    def mismatched(self) -> list[MatchedPair]:
        """Matched pairs with at least one field discrepancy."""
        return [m for m in self.matched if m.has_mismatches]


@dataclass
class ReconciliationSummary:
    """Summary of the reconciliation process."""

    # File information
    internal_filename: str
    provider_filename: str
    reconciliation_date: datetime

    # Input counts
    total_internal_transactions: int
    total_provider_transactions: int

    # Result counts
    matched_count: int
    mismatched_count: int
    internal_only_count: int
    provider_only_count: int

    # Processing metadata
    processing_time_seconds: float = 0.0
    config_file_used: Optional[str] = None

    @property
    def total_transactions(self) -> int:
        """Matched entries plus records found on one side only."""
        return self.matched_count + self.internal_only_count + self.provider_only_count

    @property
    def unmatched_count(self) -> int:
        return self.internal_only_count + self.provider_only_count

    @property
    def match_rate(self) -> float:
        """Percentage of matched entries over all result entries."""
        if self.total_transactions == 0:
            return 0.0
        return (self.matched_count / self.total_transactions) * 100
