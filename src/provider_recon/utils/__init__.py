"""Utility modules."""

from .exceptions import (
    ReconciliationError,
    TransactionParseError,
    EmptyInputError,
    ConfigurationError,
    ReportGenerationError,
)
from .logging_config import setup_logging, get_logger

__all__ = [
    "ReconciliationError",
    "TransactionParseError",
    "EmptyInputError",
    "ConfigurationError",
    "ReportGenerationError",
    "setup_logging",
    "get_logger",
]
