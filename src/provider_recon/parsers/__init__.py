"""Parsers for transaction CSV exports."""

from .csv_parser import TransactionCSVParser, infer_field_role, parse_amount, parse_csv

__all__ = ["TransactionCSVParser", "infer_field_role", "parse_amount", "parse_csv"]
