"""Filtering and aggregation package."""

from budgetbook.queries.balance import TransactionBalance
from budgetbook.queries.filter import (
    Clock,
    FilteredTransactions,
    filter_transactions,
    matches_mode,
)

__all__ = [
    "Clock",
    "FilteredTransactions",
    "TransactionBalance",
    "filter_transactions",
    "matches_mode",
]
