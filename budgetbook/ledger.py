"""
Ledger for budgetbook

This module ties together storage, validation, recurrence and the
filter/aggregation engine, and is the whole surface a UI or CLI builds on:
1. add / add_recurrence (writes)
2. filtered_items (views)
3. total_income / total_expense / balance / tag_amount_map (queries)

DESIGN DECISION: The ledger enforces the boundaries:
- Nothing is persisted without passing validation
- Write failures surface to the caller, read failures degrade to empty views
- Every write is audited
"""

from datetime import date
from typing import Iterable, Mapping, Optional, Union

import structlog

from budgetbook.audit import AuditLogger, configure_logging, create_correlation_id
from budgetbook.config import Settings, get_settings
from budgetbook.models.results import BalanceSummary, LoadStatus, ValidationResult
from budgetbook.models.transaction import (
    FilterMode,
    Period,
    Tag,
    Transaction,
    TransactionDraft,
    TransactionType,
)
from budgetbook.queries import Clock, TransactionBalance, filter_transactions
from budgetbook.recurrence import (
    IdGenerator,
    RecurrenceAbortedError,
    RecurrenceExpander,
    TimestampIdGenerator,
    recurrence_interval,
)
from budgetbook.recurrence.expander import RecurrenceLike
from budgetbook.services.storage import (
    StoreUnavailableError,
    TransactionStorageInterface,
    XmlTransactionStorage,
)
from budgetbook.tags import MalformedHierarchyError, TagHierarchy
from budgetbook.validation import TransactionValidator


logger = structlog.get_logger(__name__)


class TransactionRejectedError(ValueError):
    """A transaction failed validation and was not saved."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = "; ".join(
            issue.message for issue in result.issues if issue.severity == "error"
        )
        super().__init__(f"Transaction rejected: {messages}")


class BudgetLedger:
    """
    Collaborator interface over one record store.

    Single-threaded: callers sharing a ledger across threads must serialize
    access themselves.
    """

    def __init__(
        self,
        storage: TransactionStorageInterface,
        id_generator: Optional[IdGenerator] = None,
        validator: Optional[TransactionValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        clock: Clock = date.today,
    ):
        self._storage = storage
        self._next_id = id_generator or TimestampIdGenerator()
        self._expander = RecurrenceExpander(self._next_id)
        self._validator = validator or TransactionValidator()
        self._audit_logger = audit_logger or AuditLogger()
        self._clock = clock

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def transactions(self) -> list[Transaction]:
        """All stored transactions, or an empty list if the store is unreadable."""
        result = self._storage.load_result()
        if result.status == LoadStatus.FAILED:
            self._audit_logger.log_store_read_failed("transactions", result.reason or "")
        return list(result.items)

    def tags(self) -> list[Tag]:
        """All known tags, or an empty list if the tag store is unreadable."""
        result = self._storage.load_tags_result()
        if result.status == LoadStatus.FAILED:
            self._audit_logger.log_store_read_failed("tags", result.reason or "")
        return list(result.items)

    def tag_hierarchy(self) -> TagHierarchy:
        """
        The tag tree. A malformed tag store degrades to an empty hierarchy.
        """
        try:
            return TagHierarchy(self.tags())
        except MalformedHierarchyError as e:
            self._audit_logger.log_hierarchy_malformed(str(e))
            return TagHierarchy()

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def _check(
        self,
        candidate: Union[Transaction, TransactionDraft],
        existing_ids: Iterable[int] = (),
    ) -> None:
        validator = self._validator.with_hierarchy(self.tag_hierarchy())
        result = validator.validate(
            candidate,
            today=self._clock(),
            existing_ids=existing_ids,
        )
        if result.has_errors:
            self._audit_logger.log_validation_failed(
                [issue.model_dump() for issue in result.issues],
                transaction_id=result.transaction_id,
            )
            raise TransactionRejectedError(result)

    def _save(self, transaction: Transaction, correlation_id=None) -> None:
        try:
            self._storage.save(transaction)
        except StoreUnavailableError as e:
            self._audit_logger.log_save_failed(transaction.id, str(e), correlation_id)
            raise
        except Exception as e:
            self._audit_logger.log_error(
                error_type=type(e).__name__,
                error_message=str(e),
                details={"transaction_id": transaction.id},
                correlation_id=correlation_id,
            )
            raise
        self._audit_logger.log_transaction_saved(
            transaction_id=transaction.id,
            transaction_type=transaction.transaction_type.value,
            amount=str(transaction.amount),
            correlation_id=correlation_id,
        )

    def add(self, entry: Union[Transaction, TransactionDraft]) -> Transaction:
        """
        Validate and persist one transaction.

        Drafts are given a fresh id. A transaction whose id is already stored
        is rejected.

        Raises:
            TransactionRejectedError: If validation found errors (nothing saved)
            StoreUnavailableError: If the record could not be written
        """
        if isinstance(entry, TransactionDraft):
            self._check(entry)
            transaction = entry.to_transaction(self._next_id())
        else:
            self._check(entry, existing_ids={t.id for t in self.transactions()})
            transaction = entry
        self._save(transaction)
        return transaction

    def add_recurrence(
        self,
        template: Union[Transaction, TransactionDraft],
        end_date: date,
        recurrence: RecurrenceLike,
    ) -> list[Transaction]:
        """
        Persist every occurrence of `template` up to `end_date` inclusive.

        Each occurrence is saved as soon as it is generated. The template's
        amount is normalized with abs(), so a negative draft is accepted here.

        Raises:
            InvalidRecurrenceError: For NONE or a non-positive interval (nothing saved)
            TransactionRejectedError: If the template fails validation (nothing saved)
            RecurrenceAbortedError: If a save failed part-way; its `persisted`
                attribute lists the occurrences that were saved
        """
        interval = recurrence_interval(recurrence)
        if isinstance(template, TransactionDraft) and template.amount < 0:
            template = template.model_copy(update={"amount": abs(template.amount)})
        self._check(template)

        correlation_id = create_correlation_id()
        try:
            persisted = self._expander.expand_into(
                template,
                end_date,
                interval,
                lambda occurrence: self._save(occurrence, correlation_id),
            )
        except RecurrenceAbortedError as e:
            self._audit_logger.log_recurrence_aborted(
                persisted=len(e.persisted),
                error_message=str(e.__cause__),
                correlation_id=correlation_id,
            )
            raise

        self._audit_logger.log_recurrence_completed(
            occurrences=len(persisted),
            interval_days=interval,
            correlation_id=correlation_id,
        )
        return persisted

    # -------------------------------------------------------------------------
    # Views and queries
    # -------------------------------------------------------------------------

    def filtered_items(
        self,
        transaction_type: TransactionType,
        mode: FilterMode = FilterMode.ALL,
        period: Optional[Period] = None,
    ) -> list[Transaction]:
        return filter_transactions(
            self.transactions(),
            transaction_type,
            mode,
            period,
            today=self._clock(),
        )

    def _balance_of(
        self,
        mode: FilterMode,
        period: Optional[Period],
    ) -> TransactionBalance:
        # One read of the store; income and expense come from their own views.
        transactions = self.transactions()
        today = self._clock()
        income = filter_transactions(transactions, TransactionType.INCOME, mode, period, today)
        expense = filter_transactions(transactions, TransactionType.EXPENSE, mode, period, today)
        return TransactionBalance(income + expense)

    def total_income(
        self,
        mode: FilterMode = FilterMode.ALL,
        period: Optional[Period] = None,
    ) -> float:
        return self._balance_of(mode, period).total_income()

    def total_expense(
        self,
        mode: FilterMode = FilterMode.ALL,
        period: Optional[Period] = None,
    ) -> float:
        return self._balance_of(mode, period).total_expense()

    def balance(
        self,
        mode: FilterMode = FilterMode.ALL,
        period: Optional[Period] = None,
    ) -> float:
        return self._balance_of(mode, period).balance()

    def tag_amount_map(
        self,
        mode: FilterMode = FilterMode.ALL,
        period: Optional[Period] = None,
    ) -> Mapping[Tag, float]:
        return self._balance_of(mode, period).tag_amount_map()

    def summary(
        self,
        mode: FilterMode = FilterMode.ALL,
        period: Optional[Period] = None,
    ) -> BalanceSummary:
        """Income from the INCOME view, expenses and tag totals from the EXPENSE view."""
        return self._balance_of(mode, period).summary()


def create_app_components(
    settings: Optional[Settings] = None,
) -> tuple[BudgetLedger, XmlTransactionStorage, AuditLogger]:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to wire from. Defaults to environment / .env.

    Returns:
        (ledger, storage, audit_logger)
    """
    settings = settings or get_settings()
    app_settings = settings.app

    configure_logging("DEBUG" if app_settings.debug_mode else app_settings.log_level)

    storage = XmlTransactionStorage.from_settings(settings.storage)
    audit_logger = AuditLogger(history_size=app_settings.audit_history_size)
    validator = TransactionValidator(settings=app_settings)
    ledger = BudgetLedger(
        storage=storage,
        validator=validator,
        audit_logger=audit_logger,
    )

    logger.info(
        "ledger_ready",
        transactions_path=str(storage.transactions_path),
        tags_path=str(storage.tags_path),
        environment=app_settings.app_environment,
    )

    return ledger, storage, audit_logger
