"""
Audit Models for budgetbook

Every write to the record store, and every read that had to degrade, is
recorded as an audit event. This provides:
1. Traceability of what was persisted and when
2. Debugging information when a store could not be read
3. Visibility into partially applied recurrences

DESIGN DECISION: Audit events are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Persistence
    TRANSACTION_SAVED = "transaction_saved"
    SAVE_FAILED = "save_failed"
    STORE_READ_FAILED = "store_read_failed"

    # Validation
    VALIDATION_FAILED = "validation_failed"

    # Recurrence
    RECURRENCE_COMPLETED = "recurrence_completed"
    RECURRENCE_ABORTED = "recurrence_aborted"

    # Tag taxonomy
    HIERARCHY_MALFORMED = "hierarchy_malformed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'store', 'tags')"
    )
    entity_id: Optional[int] = Field(
        default=None,
        description="Id of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Correlates related events (e.g., all saves of one recurrence)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_saved(transaction_id, "expense", "12.50")
        event = AuditEventBuilder.store_read_failed("transactions", reason)
    """

    @staticmethod
    def transaction_saved(
        transaction_id: int,
        transaction_type: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_SAVED,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Transaction saved: {transaction_type} {amount}",
            details={
                "transaction_type": transaction_type,
                "amount": amount,
            },
        )

    @staticmethod
    def save_failed(
        transaction_id: int,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description="Transaction could not be saved",
            error_message=error_message,
        )

    @staticmethod
    def store_read_failed(
        store: str,
        reason: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_READ_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="store",
            description=f"Store read degraded to empty: {store}",
            error_message=reason,
            details={"store": store},
        )

    @staticmethod
    def validation_failed(
        issues: list[dict],
        transaction_id: Optional[int] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction rejected with {len(issues)} issue(s)",
            details={"issues": issues},
        )

    @staticmethod
    def recurrence_completed(
        occurrences: int,
        interval_days: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECURRENCE_COMPLETED,
            entity_type="recurrence",
            correlation_id=correlation_id,
            description=f"Recurrence persisted {occurrences} occurrence(s)",
            details={
                "occurrences": occurrences,
                "interval_days": interval_days,
            },
        )

    @staticmethod
    def recurrence_aborted(
        persisted: int,
        error_message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECURRENCE_ABORTED,
            severity=AuditSeverity.ERROR,
            entity_type="recurrence",
            correlation_id=correlation_id,
            description=f"Recurrence aborted after {persisted} occurrence(s)",
            error_message=error_message,
            details={"persisted": persisted},
        )

    @staticmethod
    def hierarchy_malformed(error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.HIERARCHY_MALFORMED,
            severity=AuditSeverity.ERROR,
            entity_type="tags",
            description="Tag hierarchy rejected",
            error_message=error_message,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
