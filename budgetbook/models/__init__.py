"""
Data Models Package

This package contains all Pydantic models used in budgetbook.
All data flowing through the system must conform to these schemas.
"""

from budgetbook.models.transaction import (
    MAX_TAGS_PER_TRANSACTION,
    FilterMode,
    Period,
    Recurrence,
    Tag,
    Transaction,
    TransactionDraft,
    TransactionType,
)
from budgetbook.models.results import (
    BalanceSummary,
    LoadResult,
    LoadStatus,
    TagAmount,
    ValidationIssue,
    ValidationResult,
)
from budgetbook.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction models
    "MAX_TAGS_PER_TRANSACTION",
    "FilterMode",
    "Period",
    "Recurrence",
    "Tag",
    "Transaction",
    "TransactionDraft",
    "TransactionType",
    # Results
    "BalanceSummary",
    "LoadResult",
    "LoadStatus",
    "TagAmount",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
