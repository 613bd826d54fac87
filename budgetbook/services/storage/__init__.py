"""
Storage Services Package

Provides the abstract storage interface and its implementations.
The XML file store is the default backend; the in-memory store has the
same contract.
"""

from budgetbook.services.storage.interface import (
    StorageError,
    StoreUnavailableError,
    TransactionStorageInterface,
)
from budgetbook.services.storage.memory import InMemoryTransactionStorage
from budgetbook.services.storage.xml_store import XmlTransactionStorage

__all__ = [
    # Interfaces
    "TransactionStorageInterface",
    # Exceptions
    "StorageError",
    "StoreUnavailableError",
    # Implementations
    "InMemoryTransactionStorage",
    "XmlTransactionStorage",
]
