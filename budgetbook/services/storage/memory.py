"""
In-Memory Storage Implementation

Same contract as the XML store, without touching the filesystem. Used by
tests and by hosts that keep their own persistence.
"""

from typing import Iterable

from budgetbook.models.results import LoadResult
from budgetbook.models.transaction import Tag, Transaction
from budgetbook.services.storage.interface import TransactionStorageInterface


class InMemoryTransactionStorage(TransactionStorageInterface):
    """Keeps transactions and tags in process memory."""

    def __init__(
        self,
        tags: Iterable[Tag] = (),
        transactions: Iterable[Transaction] = (),
    ):
        self._tags: tuple[Tag, ...] = tuple(tags)
        self._transactions: list[Transaction] = list(transactions)

    def load_result(self) -> LoadResult:
        # Like the file stores, attached tags come back without parents
        return LoadResult.loaded(
            t.model_copy(update={"tags": tuple(tag.detached() for tag in t.tags)})
            for t in self._transactions
        )

    def load_tags_result(self) -> LoadResult:
        return LoadResult.loaded(self._tags)

    def save(self, transaction: Transaction) -> None:
        self._transactions.append(transaction)
