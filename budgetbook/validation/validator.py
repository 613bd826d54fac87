"""
Transaction Validation

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - RECORD CHECKS:
- Amount sign (direction belongs to the type, never the sign)
- The same tag attached twice
- Sanity limits on the amount

STAGE 2 - TAXONOMY CHECKS (needs the tag hierarchy):
- Tag id known under a different name (would merge two categories)
- Tag id unknown to the hierarchy

IMPORTANT: Validation NEVER silently fixes issues.
It reports them; only error-level issues block a save.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Union

from budgetbook.config import AppSettings, get_settings
from budgetbook.models.results import ValidationIssue, ValidationResult
from budgetbook.models.transaction import Transaction, TransactionDraft
from budgetbook.tags import TagHierarchy


Candidate = Union[Transaction, TransactionDraft]


class TransactionValidator:
    """
    Validates a transaction (or draft) before it is persisted.

    Stage 1 runs on the record alone. Stage 2 runs only when a tag hierarchy
    is available.
    """

    def __init__(
        self,
        hierarchy: Optional[TagHierarchy] = None,
        settings: Optional[AppSettings] = None,
    ):
        """
        Initialize validator.

        Args:
            hierarchy: Known tags. If None, taxonomy checks are skipped.
            settings: Thresholds. Defaults to the application settings.
        """
        self._hierarchy = hierarchy
        self._settings = settings or get_settings().app

    def with_hierarchy(self, hierarchy: Optional[TagHierarchy]) -> "TransactionValidator":
        """A validator with the same thresholds checking against `hierarchy`."""
        return TransactionValidator(hierarchy=hierarchy, settings=self._settings)

    def _validate_record(
        self,
        candidate: Candidate,
        today: date,
    ) -> list[ValidationIssue]:
        issues = []

        if candidate.amount < 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="negative_amount",
                message=f"Amount ({candidate.amount}) is negative",
                severity="error",
                suggested_fix="Enter a positive amount and pick INCOME or EXPENSE",
            ))
        elif candidate.amount == 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="zero_amount",
                message="Amount is zero",
                severity="warning",
            ))

        max_amount = Decimal(str(self._settings.max_transaction_amount))
        if candidate.amount > max_amount:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message=f"Amount ({candidate.amount:,.2f}) seems unusually high",
                severity="warning",
                suggested_fix="Please verify this amount is correct",
            ))

        seen = set()
        for tag in candidate.tags:
            if tag.id in seen:
                issues.append(ValidationIssue(
                    field="tags",
                    issue_type="duplicate_tag",
                    message=f"Tag {tag.name!r} is attached more than once",
                    severity="error",
                    suggested_fix="Remove the repeated tag",
                ))
            seen.add(tag.id)

        if candidate.transaction_date > today:
            horizon = today + timedelta(days=self._settings.future_date_horizon_days)
            if candidate.transaction_date > horizon:
                issues.append(ValidationIssue(
                    field="transaction_date",
                    issue_type="future_date",
                    message=f"Date ({candidate.transaction_date}) is very far in the future",
                    severity="warning",
                    suggested_fix="Please verify the date is correct",
                ))
            else:
                issues.append(ValidationIssue(
                    field="transaction_date",
                    issue_type="scheduled",
                    message=f"Transaction is scheduled for {candidate.transaction_date}",
                    severity="info",
                ))

        return issues

    def _validate_taxonomy(self, candidate: Candidate) -> list[ValidationIssue]:
        issues = []
        if self._hierarchy is None:
            return issues

        for tag in candidate.tags:
            known = self._hierarchy.get(tag.id)
            if known is None:
                issues.append(ValidationIssue(
                    field="tags",
                    issue_type="unknown_tag",
                    message=f"Tag {tag.name!r} (id {tag.id}) is not in the tag hierarchy",
                    severity="warning",
                ))
            elif known.name != tag.name:
                issues.append(ValidationIssue(
                    field="tags",
                    issue_type="tag_name_mismatch",
                    message=(
                        f"Tag id {tag.id} is {known.name!r} in the hierarchy, "
                        f"not {tag.name!r}"
                    ),
                    severity="error",
                    suggested_fix="Pick the tag from the hierarchy",
                ))
        return issues

    def validate(
        self,
        candidate: Candidate,
        today: Optional[date] = None,
        existing_ids: Iterable[int] = (),
    ) -> ValidationResult:
        """
        Run both validation stages.

        Args:
            candidate: The transaction or draft to check
            today: Reference date for future-date checks (defaults to today)
            existing_ids: Ids already in the store; a transaction reusing one
                is rejected

        Returns:
            ValidationResult with all issues found
        """
        today = today or date.today()
        issues = self._validate_record(candidate, today)
        transaction_id = getattr(candidate, "id", None)
        if transaction_id is not None and transaction_id in set(existing_ids):
            issues.append(ValidationIssue(
                field="id",
                issue_type="duplicate_id",
                message=f"Transaction id {transaction_id} is already stored",
                severity="error",
                suggested_fix="Add the entry as a draft to get a fresh id",
            ))
        issues.extend(self._validate_taxonomy(candidate))

        return ValidationResult(
            transaction_id=transaction_id,
            issues=tuple(issues),
        )
