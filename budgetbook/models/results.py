"""
Result Models

Values returned by reads and aggregations. All of them are immutable so a
caller can hand them to a presentation layer without defensive copies.
"""

from enum import Enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from budgetbook.models.transaction import Tag


T = TypeVar("T")


class LoadStatus(str, Enum):
    """Outcome of a read from the record store."""
    LOADED = "loaded"
    EMPTY = "empty"    # Legitimately no data (e.g. store not created yet)
    FAILED = "failed"  # Store exists but could not be read


class LoadResult(BaseModel, Generic[T]):
    """
    Result of loading records from storage.

    Distinguishes "there is nothing" from "something went wrong", so the
    caller can decide whether to degrade to an empty view or surface the
    failure.
    """
    model_config = ConfigDict(frozen=True)

    status: LoadStatus
    items: tuple[T, ...] = ()
    reason: Optional[str] = Field(
        default=None,
        description="Why the load failed (FAILED only)"
    )

    @property
    def ok(self) -> bool:
        return self.status != LoadStatus.FAILED

    @classmethod
    def loaded(cls, items) -> "LoadResult":
        items = tuple(items)
        if not items:
            return cls(status=LoadStatus.EMPTY)
        return cls(status=LoadStatus.LOADED, items=items)

    @classmethod
    def empty(cls) -> "LoadResult":
        return cls(status=LoadStatus.EMPTY)

    @classmethod
    def failed(cls, reason: str) -> "LoadResult":
        return cls(status=LoadStatus.FAILED, reason=reason)


class TagAmount(BaseModel):
    """Accumulated expense amount for one tag."""
    model_config = ConfigDict(frozen=True)

    tag: Tag
    amount: float


class BalanceSummary(BaseModel):
    """Totals for a set of transactions."""
    model_config = ConfigDict(frozen=True)

    total_income: float = 0.0
    total_expense: float = 0.0
    balance: float = 0.0
    tag_amounts: tuple[TagAmount, ...] = ()

    def amount_for(self, tag: Tag) -> float:
        """Expense amount attributed to a tag (0.0 if never observed)."""
        for entry in self.tag_amounts:
            if entry.tag == tag:
                return entry.amount
        return 0.0


# =============================================================================
# VALIDATION RESULTS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""
    model_config = ConfigDict(frozen=True)

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'duplicate_tag', 'unknown_tag', 'future_date')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of validating a transaction before it is saved.

    Only error-level issues block a save; warnings and info are reported.
    """
    model_config = ConfigDict(frozen=True)

    transaction_id: Optional[int] = Field(
        default=None,
        description="Id of the validated transaction (None for drafts)"
    )
    issues: tuple[ValidationIssue, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == "warning"]
