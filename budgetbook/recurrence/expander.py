"""
Recurrence Expander

Turns one template transaction and a repeat interval into the series of
transactions it stands for.

Occurrences are dated template date, +interval, +2*interval, ... up to and
including the end date. Every occurrence gets a fresh id and a non-negative
amount. Persisting is done one occurrence at a time, so the series is not
atomic: if occurrence k cannot be saved, occurrences 1..k-1 stay saved and
the expansion stops there.
"""

from datetime import date, timedelta
from typing import Callable, Iterator, Optional, Union

import structlog

from budgetbook.models.transaction import (
    Recurrence,
    Transaction,
    TransactionDraft,
)
from budgetbook.recurrence.ids import IdGenerator, TimestampIdGenerator


logger = structlog.get_logger(__name__)

Template = Union[Transaction, TransactionDraft]
RecurrenceLike = Union[Recurrence, int, None]


class InvalidRecurrenceError(ValueError):
    """Expansion was requested without a usable repeat interval."""
    pass


class RecurrenceAbortedError(Exception):
    """
    Saving an occurrence failed part-way through a series.

    `persisted` holds the occurrences that were saved before the failure.
    The original error is chained as __cause__.
    """

    def __init__(self, persisted: list[Transaction], cause: BaseException):
        self.persisted = tuple(persisted)
        super().__init__(
            f"Recurrence aborted after {len(self.persisted)} occurrence(s): {cause}"
        )


def recurrence_interval(recurrence: RecurrenceLike) -> int:
    """
    Interval in days for a recurrence.

    Raises:
        InvalidRecurrenceError: for NONE, None, or a non-positive day count
    """
    if recurrence is None or isinstance(recurrence, bool):
        raise InvalidRecurrenceError(f"Not a repeat interval: {recurrence!r}")
    if not isinstance(recurrence, int):
        raise InvalidRecurrenceError(f"Not a repeat interval: {recurrence!r}")
    days = int(recurrence)
    if days <= 0:
        raise InvalidRecurrenceError(
            "Recurrence NONE cannot be expanded; add the transaction once instead"
        )
    return days


class RecurrenceExpander:
    """Generates recurring transactions from a template."""

    def __init__(self, id_generator: Optional[IdGenerator] = None):
        self._next_id = id_generator or TimestampIdGenerator()

    def expand(
        self,
        template: Template,
        end_date: date,
        recurrence: RecurrenceLike,
    ) -> Iterator[Transaction]:
        """
        Lazily yield the occurrences of `template` up to `end_date` inclusive.

        The recurrence is checked before anything is produced, so an
        invalid one raises here rather than on first iteration.
        """
        step = timedelta(days=recurrence_interval(recurrence))
        return self._occurrences(template, end_date, step)

    def _occurrences(
        self,
        template: Template,
        end_date: date,
        step: timedelta,
    ) -> Iterator[Transaction]:
        current = template.transaction_date
        amount = abs(template.amount)
        while current <= end_date:
            yield Transaction(
                id=self._next_id(),
                amount=amount,
                transaction_type=template.transaction_type,
                transaction_date=current,
                tags=template.tags,
            )
            try:
                current += step
            except OverflowError:
                return

    def expand_into(
        self,
        template: Template,
        end_date: date,
        recurrence: RecurrenceLike,
        sink: Callable[[Transaction], object],
    ) -> list[Transaction]:
        """
        Hand every occurrence to `sink` as soon as it is generated.

        Returns the occurrences handed over.

        Raises:
            InvalidRecurrenceError: before anything reaches the sink
            RecurrenceAbortedError: when the sink fails on an occurrence
        """
        persisted: list[Transaction] = []
        for occurrence in self.expand(template, end_date, recurrence):
            try:
                sink(occurrence)
            except Exception as e:
                logger.error(
                    "recurrence_aborted",
                    persisted=len(persisted),
                    failed_id=occurrence.id,
                    failed_date=occurrence.transaction_date.isoformat(),
                    error=str(e),
                )
                raise RecurrenceAbortedError(persisted, e) from e
            persisted.append(occurrence)
        return persisted
