"""
Filter Engine

Produces the view of transactions matching one type, a temporal mode and an
optional period. Filtering is stable: the relative order of the input is
kept, nothing is sorted.

"Today" is read from an injectable clock at call time, so results change
from one day to the next. Tests pass a fixed clock or an explicit `today`.
"""

from datetime import date
from typing import Callable, Iterable, Optional

from budgetbook.models.transaction import (
    FilterMode,
    Period,
    Transaction,
    TransactionType,
)


Clock = Callable[[], date]


def matches_mode(transaction: Transaction, mode: FilterMode, today: date) -> bool:
    """Temporal predicate: ALL always, PAST strictly before today, FUTURE strictly after."""
    if mode == FilterMode.ALL:
        return True
    if mode == FilterMode.PAST:
        return transaction.transaction_date < today
    if mode == FilterMode.FUTURE:
        return transaction.transaction_date > today
    raise ValueError(f"Unknown filter mode: {mode}")


def filter_transactions(
    transactions: Iterable[Transaction],
    transaction_type: TransactionType,
    mode: FilterMode = FilterMode.ALL,
    period: Optional[Period] = None,
    today: Optional[date] = None,
) -> list[Transaction]:
    """
    Return the transactions of `transaction_type` that satisfy `mode` and,
    when given, fall inside `period` (inclusive).

    The input is only iterated, never mutated or retained.
    """
    today = today or date.today()
    return [
        t for t in transactions
        if t.transaction_type == transaction_type
        and matches_mode(t, mode, today)
        and (period is None or period.contains(t.transaction_date, today))
    ]


class FilteredTransactions:
    """
    A reusable filtered view over a snapshot of transactions.

    The clock is consulted every time filtered_items() is called.
    """

    def __init__(
        self,
        transactions: Iterable[Transaction],
        mode: FilterMode,
        period: Optional[Period],
        transaction_type: TransactionType,
        clock: Clock = date.today,
    ):
        self._transactions = tuple(transactions)
        self._mode = mode
        self._period = period
        self._type = transaction_type
        self._clock = clock

    def filtered_items(self) -> list[Transaction]:
        return filter_transactions(
            self._transactions,
            self._type,
            self._mode,
            self._period,
            today=self._clock(),
        )
