"""Recurring transactions package."""

from budgetbook.recurrence.expander import (
    InvalidRecurrenceError,
    RecurrenceAbortedError,
    RecurrenceExpander,
    recurrence_interval,
)
from budgetbook.recurrence.ids import (
    IdGenerator,
    SequentialIdGenerator,
    TimestampIdGenerator,
)

__all__ = [
    "IdGenerator",
    "InvalidRecurrenceError",
    "RecurrenceAbortedError",
    "RecurrenceExpander",
    "SequentialIdGenerator",
    "TimestampIdGenerator",
    "recurrence_interval",
]
