"""
Tests for budgetbook models

Test strategy:
1. Unit tests for individual components (models, hierarchy, engine)
2. Integration tests for the ledger over in-memory and XML stores
3. No real clock dependence in tests (inject today / clock)
"""

import pytest
from datetime import date, timedelta
from decimal import Decimal

from pydantic import ValidationError

from budgetbook.models import (
    MAX_TAGS_PER_TRANSACTION,
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    BalanceSummary,
    FilterMode,
    LoadResult,
    LoadStatus,
    Period,
    Recurrence,
    Tag,
    TagAmount,
    Transaction,
    TransactionDraft,
    TransactionType,
    ValidationIssue,
    ValidationResult,
)


class TestTag:
    """Tests for the Tag model."""

    def test_tag_creation(self):
        """Test Tag model creation."""
        tag = Tag(id=2, name="Groceries", parent_id=1)
        assert tag.name == "Groceries"
        assert tag.parent_id == 1
        assert tag.is_root is False

    def test_tag_strips_whitespace(self):
        """Test that whitespace is stripped from tag names."""
        assert Tag(id=1, name="  Food  ").name == "Food"

    def test_tag_rejects_empty_name(self):
        """Test that an empty name is rejected."""
        with pytest.raises(ValidationError):
            Tag(id=1, name="   ")

    def test_equality_ignores_parent(self):
        """A detached copy equals the hierarchy node it came from."""
        node = Tag(id=2, name="Groceries", parent_id=1)
        attached = Tag(id=2, name="Groceries")
        assert node == attached
        assert hash(node) == hash(attached)

    def test_same_id_different_name_is_not_equal(self):
        """Tags sharing an id but not a name are kept apart."""
        assert Tag(id=1, name="Food") != Tag(id=1, name="Fuel")

    def test_detached_drops_parent(self):
        """Test detached() returns a parentless copy."""
        tag = Tag(id=2, name="Groceries", parent_id=1)
        detached = tag.detached()
        assert detached.parent_id is None
        assert tag.parent_id == 1

    def test_long_tag_name_accepted(self):
        """Tag names have no upper length limit."""
        name = "x" * 250
        assert Tag(id=1, name=name).name == name

    def test_tag_is_immutable(self):
        """Test tags cannot be mutated."""
        tag = Tag(id=1, name="Food")
        with pytest.raises(ValidationError):
            tag.name = "Other"


class TestTransaction:
    """Tests for Transaction and TransactionDraft."""

    def test_transaction_creation(self, tags):
        """Test Transaction model creation."""
        tx = Transaction(
            id=1,
            amount=Decimal("12.50"),
            transaction_type=TransactionType.EXPENSE,
            transaction_date=date(2025, 1, 1),
            tags=[tags["food"], tags["groceries"]],
        )
        assert tx.amount == Decimal("12.50")
        assert tx.tags == (tags["food"], tags["groceries"])

    def test_transaction_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValidationError):
            Transaction(
                id=1,
                amount=Decimal("-1"),
                transaction_type=TransactionType.EXPENSE,
                transaction_date=date(2025, 1, 1),
            )

    def test_transaction_allows_three_tags(self, tags):
        """Test the tag limit itself is accepted."""
        tx = Transaction(
            id=1,
            amount=Decimal("1"),
            transaction_type=TransactionType.EXPENSE,
            transaction_date=date(2025, 1, 1),
            tags=[tags["food"], tags["groceries"], tags["transport"]],
        )
        assert len(tx.tags) == MAX_TAGS_PER_TRANSACTION == 3

    def test_transaction_rejects_four_tags(self, tags):
        """Test more than three tags are rejected."""
        with pytest.raises(ValidationError):
            Transaction(
                id=1,
                amount=Decimal("1"),
                transaction_type=TransactionType.EXPENSE,
                transaction_date=date(2025, 1, 1),
                tags=list(tags.values())[:4],
            )

    def test_transaction_is_immutable(self, make_transaction):
        """Test transactions cannot be mutated."""
        tx = make_transaction()
        with pytest.raises(ValidationError):
            tx.amount = Decimal("99")

    def test_draft_accepts_negative_amount(self):
        """Drafts take the amount as entered."""
        draft = TransactionDraft(
            amount=Decimal("-20"),
            transaction_type=TransactionType.EXPENSE,
            transaction_date=date(2025, 1, 1),
        )
        assert draft.amount == Decimal("-20")

    def test_draft_to_transaction(self, tags):
        """Test a draft becomes a transaction with the given id."""
        draft = TransactionDraft(
            amount=Decimal("20"),
            transaction_type=TransactionType.INCOME,
            transaction_date=date(2025, 1, 1),
            tags=[tags["salary"]],
        )
        tx = draft.to_transaction(42)
        assert tx.id == 42
        assert tx.amount == Decimal("20")
        assert tx.tags == (tags["salary"],)

    def test_draft_to_transaction_normalizes_amount(self):
        """Test normalize_amount applies abs()."""
        draft = TransactionDraft(
            amount=Decimal("-20"),
            transaction_type=TransactionType.EXPENSE,
            transaction_date=date(2025, 1, 1),
        )
        tx = draft.to_transaction(1, date(2025, 2, 1), normalize_amount=True)
        assert tx.amount == Decimal("20")
        assert tx.transaction_date == date(2025, 2, 1)

    def test_negative_draft_cannot_become_transaction_unnormalized(self):
        """Test the non-negative invariant still applies on conversion."""
        draft = TransactionDraft(
            amount=Decimal("-20"),
            transaction_type=TransactionType.EXPENSE,
            transaction_date=date(2025, 1, 1),
        )
        with pytest.raises(ValidationError):
            draft.to_transaction(1)


class TestPeriod:
    """Tests for Period inclusion semantics."""

    def test_contains_is_inclusive(self, today):
        """Both bounds are included."""
        period = Period(start=date(2025, 1, 1), end=date(2025, 1, 31))
        assert period.contains(date(2025, 1, 1), today)
        assert period.contains(date(2025, 1, 31), today)
        assert period.contains(date(2025, 1, 10), today)
        assert not period.contains(date(2024, 12, 31), today)
        assert not period.contains(date(2025, 2, 1), today)

    def test_missing_end_means_today(self, today):
        """A missing end bound is today."""
        period = Period(start=date(2025, 1, 1))
        assert period.contains(today, today)
        assert not period.contains(today + timedelta(days=1), today)

    def test_missing_start_means_today(self, today):
        """A missing start bound is today."""
        period = Period(end=date(2025, 12, 31))
        assert period.contains(today, today)
        assert not period.contains(today - timedelta(days=1), today)

    def test_no_bounds_contains_only_today(self, today):
        """A period with no bounds contains only today."""
        period = Period()
        assert period.contains(today, today)
        assert not period.contains(today - timedelta(days=1), today)
        assert not period.contains(today + timedelta(days=1), today)

    def test_today_defaults_to_current_date(self):
        """Without an explicit today, the current date is used at call time."""
        assert Period().contains(date.today())

    def test_inverted_period_contains_nothing(self, today):
        """A period ending before it starts is an empty range."""
        period = Period(start=date(2025, 2, 1), end=date(2025, 1, 1))
        assert not period.contains(date(2025, 1, 15), today)
        assert not period.contains(date(2025, 1, 1), today)
        assert not period.contains(date(2025, 2, 1), today)

    def test_start_after_today_without_end_contains_nothing(self, today):
        """An open period starting after today is empty as well."""
        period = Period(start=today + timedelta(days=1))
        assert not period.contains(today, today)
        assert not period.contains(today + timedelta(days=1), today)


class TestEnums:
    """Tests for enums."""

    def test_recurrence_days(self):
        """Test recurrence interval values."""
        assert Recurrence.NONE.days == 0
        assert Recurrence.DAILY.days == 1
        assert Recurrence.WEEKLY.days == 7
        assert Recurrence.YEARLY.days == 365

    def test_transaction_type_values(self):
        """Test transaction type string values."""
        assert TransactionType.INCOME.value == "income"
        assert TransactionType("expense") is TransactionType.EXPENSE

    def test_filter_modes(self):
        """Test that expected filter modes exist."""
        assert {m.value for m in FilterMode} == {"all", "past", "future"}


class TestResults:
    """Tests for result models."""

    def test_loaded_with_items(self, make_transaction):
        """Test LOADED result."""
        result = LoadResult.loaded([make_transaction()])
        assert result.status == LoadStatus.LOADED
        assert result.ok
        assert len(result.items) == 1

    def test_loaded_without_items_is_empty(self):
        """Test that loading nothing reports EMPTY."""
        result = LoadResult.loaded([])
        assert result.status == LoadStatus.EMPTY
        assert result.ok
        assert result.items == ()

    def test_failed_result(self):
        """Test FAILED result carries a reason and no items."""
        result = LoadResult.failed("broken file")
        assert result.status == LoadStatus.FAILED
        assert not result.ok
        assert result.reason == "broken file"
        assert result.items == ()

    def test_balance_summary_amount_for(self, tags):
        """Test amount lookup on a summary."""
        summary = BalanceSummary(
            total_expense=30.0,
            balance=-30.0,
            tag_amounts=(TagAmount(tag=tags["food"], amount=30.0),),
        )
        assert summary.amount_for(Tag(id=1, name="Food")) == 30.0
        assert summary.amount_for(tags["transport"]) == 0.0

    def test_validation_result_has_errors(self):
        """Test has_errors property."""
        result = ValidationResult(
            issues=(
                ValidationIssue(
                    field="tags",
                    issue_type="duplicate_tag",
                    message="Tag attached twice",
                    severity="error",
                ),
            ),
        )
        assert result.has_errors is True
        assert result.is_valid is False
        assert result.error_count == 1

    def test_validation_result_warnings_only(self):
        """Test that warnings don't count as errors."""
        result = ValidationResult(
            issues=(
                ValidationIssue(
                    field="amount",
                    issue_type="zero_amount",
                    message="Amount is zero",
                    severity="warning",
                ),
            ),
        )
        assert result.has_errors is False
        assert result.warnings == ["Amount is zero"]

    def test_validation_issue_severity_pattern(self):
        """Test unknown severities are rejected."""
        with pytest.raises(ValidationError):
            ValidationIssue(field="x", issue_type="y", message="z", severity="fatal")


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.TRANSACTION_SAVED,
            description="Saved",
        )
        assert event.severity == AuditSeverity.INFO
        assert event.timestamp.tzinfo is not None

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.transaction_saved(
            transaction_id=7,
            transaction_type="expense",
            amount="12.50",
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "transaction_saved"
        assert log_dict["entity_id"] == 7
        assert log_dict["details"]["amount"] == "12.50"

    def test_builder_store_read_failed(self):
        """Test AuditEventBuilder.store_read_failed."""
        event = AuditEventBuilder.store_read_failed("tags", "bad xml")
        assert event.event_type == AuditEventType.STORE_READ_FAILED
        assert event.severity == AuditSeverity.WARNING
        assert event.error_message == "bad xml"

    def test_builder_recurrence_aborted(self):
        """Test AuditEventBuilder.recurrence_aborted."""
        from uuid import uuid4
        correlation_id = uuid4()
        event = AuditEventBuilder.recurrence_aborted(2, "disk full", correlation_id)
        assert event.severity == AuditSeverity.ERROR
        assert event.details["persisted"] == 2
        assert event.correlation_id == correlation_id


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
