"""
Balance Aggregator

Totals over an already filtered sequence of transactions.

Amounts are summed as binary floats in input order, matching what the
presentation layer displays. The per-tag breakdown is built in a fresh
mapping and handed out read-only; the input is never mutated.
"""

from types import MappingProxyType
from typing import Iterable, Mapping

from budgetbook.models.results import BalanceSummary, TagAmount
from budgetbook.models.transaction import Tag, Transaction, TransactionType


class TransactionBalance:
    """
    Income, expense, balance and per-tag expense totals of a transaction set.

    Usage:
        balance = TransactionBalance(filtered)
        balance.balance() == balance.total_income() - balance.total_expense()
    """

    def __init__(self, transactions: Iterable[Transaction]):
        self._items: tuple[Transaction, ...] = tuple(transactions)

    def _total(self, transaction_type: TransactionType) -> float:
        return sum(
            (float(t.amount) for t in self._items if t.transaction_type == transaction_type),
            0.0,
        )

    def total_income(self) -> float:
        return self._total(TransactionType.INCOME)

    def total_expense(self) -> float:
        return self._total(TransactionType.EXPENSE)

    def balance(self) -> float:
        return self.total_income() - self.total_expense()

    def tag_amount_map(self) -> Mapping[Tag, float]:
        """
        Expense amount per tag.

        Keys are exactly the tags attached to at least one EXPENSE record;
        tags never observed are absent rather than zero.
        """
        totals: dict[Tag, float] = {}
        for transaction in self._items:
            if transaction.transaction_type != TransactionType.EXPENSE:
                continue
            # Every tag gets the full amount; amounts are not split across tags.
            amount = float(transaction.amount)
            for tag in transaction.tags:
                totals[tag] = totals.get(tag, 0.0) + amount
        return MappingProxyType(totals)

    def summary(self) -> BalanceSummary:
        return BalanceSummary(
            total_income=self.total_income(),
            total_expense=self.total_expense(),
            balance=self.balance(),
            tag_amounts=tuple(
                TagAmount(tag=tag, amount=amount)
                for tag, amount in self.tag_amount_map().items()
            ),
        )
