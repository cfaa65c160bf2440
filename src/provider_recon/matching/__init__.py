"""Matching engine."""

from .engine import ReconciliationEngine, reconcile_transactions

__all__ = ["ReconciliationEngine", "reconcile_transactions"]
