"""
Transaction CSV parser.
Turns internal exports and provider statements into Transaction records,
inferring what each column holds from its header name.
"""

from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Iterator, Optional
import csv
import io
import logging
import re

import pandas as pd

from ..config import DEFAULT_FIELD_KEYWORDS, ReconConfig
from ..models.transaction import Transaction
from ..utils.exceptions import TransactionParseError

logger = logging.getLogger(__name__)

# Anything that is not part of a plain signed decimal number
_AMOUNT_NOISE = re.compile(r"[^0-9.\-]")
_NUMERIC_PREFIX = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")


def parse_amount(value: str) -> Decimal:
    """
    Parse a loosely formatted amount such as ``"$1,234.56"``.

    Currency symbols, thousands separators and other noise are removed,
    then the longest leading number is used. Anything unparseable is 0.
    """
    cleaned = _AMOUNT_NOISE.sub("", value)
    match = _NUMERIC_PREFIX.match(cleaned)
    if not match:
        return Decimal("0")
    try:
        amount = Decimal(match.group())
    except InvalidOperation:
        return Decimal("0")
    return amount if amount != 0 else Decimal("0")


def infer_field_role(
    header: str, field_keywords: Optional[dict[str, list[str]]] = None
) -> Optional[str]:
    """
    Work out which transaction field a column holds.

    Args:
        header: Column header as it appears in the file
        field_keywords: Ordered mapping of role to header keywords

    Returns:
        The role name, or None for columns kept as extra attributes
    """
    keywords = field_keywords if field_keywords is not None else DEFAULT_FIELD_KEYWORDS
    lowered = header.lower()
    for role, words in keywords.items():
        if any(word in lowered for word in words):
            return role
    return None


def _clean_cell(value: str) -> str:
    return value.strip().replace('"', "")


def _quoted_rows(text: str) -> Iterator[list[str]]:
    """Quote-aware row reader; stops at the first unreadable record."""
    reader = csv.reader(io.StringIO(text))
    try:
        yield from reader
    except csv.Error as e:
        logger.warning(f"Stopped reading CSV at line {reader.line_num}: {e}")


class TransactionCSVParser:
    """
    Parser for comma-delimited transaction exports.

    Parsing is lenient: malformed rows are skipped and bad amounts become
    zero, so ``parse_text`` never raises.
    """

    def __init__(self, config: Optional[ReconConfig] = None):
        """
        Initialize the parser with configuration.

        Args:
            config: Application configuration object
        """
        self.config = config or ReconConfig()
        input_config = self.config.input
        self.encoding = input_config.encoding
        self.csv_mode = input_config.csv_mode
        self.field_keywords = input_config.field_keywords

    def parse_file(self, file_path: Path) -> list[Transaction]:
        """
        Read a CSV file and return its transactions.

        Args:
            file_path: Path to the CSV file

        Returns:
            List of transactions

        Raises:
            TransactionParseError: If the file cannot be read or decoded
        """
        logger.info(f"Parsing transaction CSV file: {file_path}")

        try:
            text = Path(file_path).read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read CSV file: {e}")
            raise TransactionParseError(f"Failed to read CSV file: {e}") from e

        transactions = self.parse_text(text)
        logger.info(f"Extracted {len(transactions)} transactions from {file_path}")

        return transactions

    def parse_text(self, text: str) -> list[Transaction]:
        """
        Parse CSV text into transactions.

        The first line is the header. Rows whose field count differs from
        the header, and rows without a reference, are dropped.

        Args:
            text: Raw CSV content

        Returns:
            List of transactions in input order
        """
        rows = self._split_rows(text.strip())
        header_row = next(rows, None)
        if header_row is None:
            return []

        headers = [_clean_cell(h) for h in header_row]
        roles = [infer_field_role(h, self.field_keywords) for h in headers]

        transactions: list[Transaction] = []
        for row_no, values in enumerate(rows, start=2):
            if len(values) != len(headers):
                logger.debug(
                    f"Row {row_no}: expected {len(headers)} fields, "
                    f"got {len(values)}, skipping"
                )
                continue

            txn = self._build_transaction(headers, roles, [_clean_cell(v) for v in values])
            if not txn.reference:
                logger.debug(f"Row {row_no}: no transaction reference, skipping")
                continue
            transactions.append(txn)

        logger.debug(f"Parsed {len(transactions)} transactions")
        return transactions

    def _split_rows(self, text: str) -> Iterator[list[str]]:
        """Yield the raw cells of each line, header first."""
        if not text:
            return iter(())
        if self.csv_mode == "rfc4180":
            return _quoted_rows(text)
        # Plain comma split; quoted commas are not protected
        return (line.split(",") for line in text.split("\n"))

    def _build_transaction(
        self, headers: list[str], roles: list[Optional[str]], values: list[str]
    ) -> Transaction:
        """
        Assemble one Transaction from a row.

        When several columns share a role, the right-most one wins.
        """
        txn = Transaction(reference="")

        for header, role, value in zip(headers, roles, values):
            if role == "reference":
                txn.reference = value
            elif role == "amount":
                txn.amount = parse_amount(value)
            elif role == "status":
                txn.status = value
            elif role in ("date", "description"):
                txn.set_field(role, value)
            else:
                txn.set_field(header, value)

        return txn

    def get_file_summary(self, file_path: Path) -> dict:
        """
        Get summary information from a transaction CSV file.

        Args:
            file_path: Path to the CSV file

        Returns:
            Dictionary with file summary information
        """
        try:
            text = Path(file_path).read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise TransactionParseError(f"Failed to read CSV file: {e}") from e

        try:
            df = pd.read_csv(
                io.StringIO(text),
                dtype=str,
                keep_default_na=False,
                on_bad_lines="skip",
            )
        except pd.errors.EmptyDataError:
            df = pd.DataFrame()
        except pd.errors.ParserError as e:
            raise TransactionParseError(f"Failed to read CSV file: {e}") from e

        # Report the header exactly as parse_text splits it
        header_row = next(self._split_rows(text.strip()), None) or []
        columns = [_clean_cell(h) for h in header_row]
        field_roles = {
            col: infer_field_role(col, self.field_keywords) or "extra" for col in columns
        }

        transactions = self.parse_text(text)
        statuses = pd.Series([t.status for t in transactions], dtype=str)

        summary = {
            "row_count": len(df),
            "columns": columns,
            "field_roles": field_roles,
            "parsed_transactions": len(transactions),
            "skipped_rows": max(len(df) - len(transactions), 0),
            "total_amount": float(sum((t.amount for t in transactions), Decimal("0"))),
            "statuses": (
                statuses.value_counts().to_dict()
                if "status" in field_roles.values()
                else {}
            ),
        }

        return summary


def parse_csv(text: str, config: Optional[ReconConfig] = None) -> list[Transaction]:
    """Parse CSV text with the given (or default) configuration."""
    return TransactionCSVParser(config).parse_text(text)
