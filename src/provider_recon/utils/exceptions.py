"""Custom exceptions for the reconciliation application."""


class ReconciliationError(Exception):
    """Base exception for reconciliation errors."""

    pass


class TransactionParseError(ReconciliationError):
    """Error reading a transaction CSV file."""

    pass


class EmptyInputError(ReconciliationError):
    """One side of the reconciliation contains no usable transactions."""

    def __init__(self, side: str):
        self.side = side
        super().__init__(f"No valid transactions found in {side} file")


class ConfigurationError(ReconciliationError):
    """Error in configuration."""

    pass


class ReportGenerationError(ReconciliationError):
    """Error writing a reconciliation report."""

    pass
