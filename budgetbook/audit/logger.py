"""
Audit Logger

DESIGN DECISION: Every write to the record store is logged, and so is every
read that had to degrade. This provides:
1. Traceability of what was saved
2. Debugging capability when a store is unreadable
3. A record of recurrences that were only partially applied

The audit logger:
- Writes to the structured local log
- Keeps a bounded in-memory history of recent events
- Never raises into the caller if logging itself fails
- Supports correlation IDs to trace related events
"""

import logging
from collections import deque
from typing import Optional
from uuid import UUID, uuid4

import structlog

from budgetbook.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route the structured log to stderr at `level`."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper()))
    logging.getLogger("budgetbook").setLevel(level.upper())


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An in-memory history (for display and tests)
    """

    def __init__(self, history_size: int = 500):
        """
        Initialize audit logger.

        Args:
            history_size: Number of recent events kept in memory.
        """
        self._history: deque[AuditEvent] = deque(maxlen=history_size)
        self._logger = structlog.get_logger("budgetbook.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was written to the local log.
        """
        self._history.append(event)
        log_dict = event.to_log_dict()

        try:
            if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception:
            # Audit must never break the operation being audited
            return False
        return True

    def recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """Most recent events, newest first."""
        return list(reversed(self._history))[:limit]

    def log_transaction_saved(
        self,
        transaction_id: int,
        transaction_type: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.transaction_saved(
            transaction_id=transaction_id,
            transaction_type=transaction_type,
            amount=amount,
            correlation_id=correlation_id,
        ))

    def log_save_failed(
        self,
        transaction_id: int,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.save_failed(
            transaction_id=transaction_id,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    def log_store_read_failed(self, store: str, reason: str) -> None:
        self.log(AuditEventBuilder.store_read_failed(store=store, reason=reason))

    def log_validation_failed(
        self,
        issues: list[dict],
        transaction_id: Optional[int] = None,
    ) -> None:
        self.log(AuditEventBuilder.validation_failed(
            issues=issues,
            transaction_id=transaction_id,
        ))

    def log_recurrence_completed(
        self,
        occurrences: int,
        interval_days: int,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.recurrence_completed(
            occurrences=occurrences,
            interval_days=interval_days,
            correlation_id=correlation_id,
        ))

    def log_recurrence_aborted(
        self,
        persisted: int,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.recurrence_aborted(
            persisted=persisted,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    def log_hierarchy_malformed(self, error_message: str) -> None:
        self.log(AuditEventBuilder.hierarchy_malformed(error_message))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action (e.g., adding a recurrence).
    Pass it through all subsequent operations.
    """
    return uuid4()
