"""Validation package."""

from budgetbook.validation.validator import TransactionValidator

__all__ = ["TransactionValidator"]
