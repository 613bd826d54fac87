"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap the XML files for a database later
2. Use in-memory storage for testing
3. Keep filtering and aggregation decoupled from the storage format

Read/write policy:
- Reads report LOADED / EMPTY / FAILED through LoadResult. The convenience
  readers load() and load_tags() degrade FAILED to an empty list and log it,
  so a presentation layer can always render.
- Writes raise. Losing a money record silently is never acceptable.
"""

from abc import ABC, abstractmethod

import structlog

from budgetbook.models.results import LoadResult, LoadStatus
from budgetbook.models.transaction import Tag, Transaction


logger = structlog.get_logger(__name__)


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StoreUnavailableError(StorageError):
    """The underlying medium could not be read or written."""
    pass


class TransactionStorageInterface(ABC):
    """
    Abstract interface for the transaction and tag stores.

    Single writer, single reader: implementations are not required to be
    safe under concurrent save() calls.
    """

    @abstractmethod
    def load_result(self) -> LoadResult:
        """
        Load every stored transaction, in stored order.

        Tags attached to the returned transactions carry id and name only;
        their parent links are not restored.
        """
        pass

    @abstractmethod
    def load_tags_result(self) -> LoadResult:
        """Load every stored tag, with parent links restored."""
        pass

    @abstractmethod
    def save(self, transaction: Transaction) -> None:
        """
        Append one transaction, creating the store if absent.

        Either the record is durably appended or the store is unchanged.

        Raises:
            StoreUnavailableError: If the record could not be written
        """
        pass

    def load(self) -> list[Transaction]:
        """Best-effort read of all transactions (empty on failure)."""
        return list(self._degrade(self.load_result(), "transactions"))

    def load_tags(self) -> list[Tag]:
        """Best-effort read of all tags (empty on failure)."""
        return list(self._degrade(self.load_tags_result(), "tags"))

    @staticmethod
    def _degrade(result: LoadResult, store: str) -> tuple:
        if result.status == LoadStatus.FAILED:
            logger.warning("store_read_degraded", store=store, reason=result.reason)
        return result.items
