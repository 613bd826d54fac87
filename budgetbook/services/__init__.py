"""Services package."""

from budgetbook.services.storage import (
    InMemoryTransactionStorage,
    StorageError,
    StoreUnavailableError,
    TransactionStorageInterface,
    XmlTransactionStorage,
)

__all__ = [
    # Storage services
    "InMemoryTransactionStorage",
    "StorageError",
    "StoreUnavailableError",
    "TransactionStorageInterface",
    "XmlTransactionStorage",
]
