"""
Core Data Models for budgetbook

These models define the schemas for every money record flowing through the
system. They are designed to:
1. Enforce type safety at runtime
2. Be immutable once constructed (corrections are new records)
3. Be serializable for storage and logging

DESIGN DECISION: Direction of money is carried by TransactionType, never by
the sign of the amount. A stored Transaction always has amount >= 0.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# A record holds at most 3 tags.
MAX_TAGS_PER_TRANSACTION = 3


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a transaction."""
    INCOME = "income"
    EXPENSE = "expense"


class FilterMode(str, Enum):
    """
    Temporal filter relative to the current date.

    PAST and FUTURE are strict: a transaction dated today is in neither.
    """
    ALL = "all"
    PAST = "past"
    FUTURE = "future"


class Recurrence(int, Enum):
    """
    Repeat interval for a transaction, measured in days.

    NONE signals a one-shot transaction and must never be expanded.
    """
    NONE = 0
    DAILY = 1
    WEEKLY = 7
    BIWEEKLY = 14
    MONTHLY = 30
    YEARLY = 365

    @property
    def days(self) -> int:
        return int(self.value)


# =============================================================================
# TAGS
# =============================================================================

class Tag(BaseModel):
    """
    A named category, optionally nested under a parent category.

    The parent is referenced by id and resolved through a TagHierarchy.
    A tag with no parent_id is a root category.

    Equality and hashing use (id, name) only: the copy attached to a
    transaction (no parent) equals the hierarchy node it came from, while
    two tags that share an id but not a name stay distinct.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: int = Field(
        ...,
        ge=0,
        description="Tag identifier"
    )
    name: str = Field(
        ...,
        min_length=1,
        description="Display name of the tag"
    )
    parent_id: Optional[int] = Field(
        default=None,
        description="Id of the parent tag, None for a root category"
    )

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def detached(self) -> "Tag":
        """Return a copy of this tag without its parent reference."""
        if self.parent_id is None:
            return self
        return self.model_copy(update={"parent_id": None})

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tag):
            return NotImplemented
        return (self.id, self.name) == (other.id, other.name)

    def __hash__(self) -> int:
        return hash((self.id, self.name))


# =============================================================================
# TRANSACTIONS
# =============================================================================

class _TransactionFields(BaseModel):
    """Fields shared by persisted transactions and unsaved drafts."""
    model_config = ConfigDict(frozen=True)

    transaction_type: TransactionType = Field(
        ...,
        description="Income or expense"
    )
    transaction_date: date = Field(
        ...,
        description="Calendar date of the transaction"
    )
    tags: tuple[Tag, ...] = Field(
        default=(),
        max_length=MAX_TAGS_PER_TRANSACTION,
        description="Ordered tags attached to the transaction"
    )


class Transaction(_TransactionFields):
    """
    One monetary event.

    CRITICAL: Transactions are never mutated after creation.
    """

    id: int = Field(
        ...,
        ge=0,
        description="Unique transaction id (time-derived by default)"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Non-negative amount; direction comes from transaction_type"
    )


class TransactionDraft(_TransactionFields):
    """
    A transaction as entered, before it has an id.

    The amount is taken as typed and may be negative; validation reports
    that, and recurrence expansion normalizes it with abs().
    """

    amount: Decimal = Field(
        ...,
        description="Amount as entered"
    )

    def to_transaction(
        self,
        transaction_id: int,
        transaction_date: Optional[date] = None,
        normalize_amount: bool = False,
    ) -> Transaction:
        """Build the persisted form of this draft."""
        return Transaction(
            id=transaction_id,
            amount=abs(self.amount) if normalize_amount else self.amount,
            transaction_type=self.transaction_type,
            transaction_date=transaction_date or self.transaction_date,
            tags=self.tags,
        )


# =============================================================================
# PERIOD
# =============================================================================

class Period(BaseModel):
    """
    An inclusive date range with defaultable bounds.

    A missing bound stands for "today", evaluated when the period is used,
    not when it is built. A period with no bounds contains only today, and one
    whose end falls before its start contains nothing.
    """
    model_config = ConfigDict(frozen=True)

    start: Optional[date] = None
    end: Optional[date] = None

    def start_or_today(self, today: Optional[date] = None) -> date:
        if self.start is not None:
            return self.start
        return today or date.today()

    def end_or_today(self, today: Optional[date] = None) -> date:
        if self.end is not None:
            return self.end
        return today or date.today()

    def contains(self, value: date, today: Optional[date] = None) -> bool:
        """Check start <= value <= end, substituting today for missing bounds."""
        today = today or date.today()
        return self.start_or_today(today) <= value <= self.end_or_today(today)
