"""Shared fixtures: a small tag tree, a fixed "today" and a transaction factory."""

from datetime import date
from decimal import Decimal

import pytest

from budgetbook.models import Tag, Transaction, TransactionType


TODAY = date(2025, 1, 15)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def tags() -> dict[str, Tag]:
    """
    Food
      Groceries
      Restaurants
    Salary
    Transport
    """
    return {
        "food": Tag(id=1, name="Food"),
        "groceries": Tag(id=2, name="Groceries", parent_id=1),
        "restaurants": Tag(id=3, name="Restaurants", parent_id=1),
        "salary": Tag(id=4, name="Salary"),
        "transport": Tag(id=5, name="Transport"),
    }


@pytest.fixture
def make_transaction():
    """Factory for transactions with sensible defaults and auto ids."""
    counter = iter(range(1, 10_000))

    def _make(
        amount="10",
        transaction_type=TransactionType.EXPENSE,
        transaction_date=TODAY,
        tags=(),
        id=None,
    ) -> Transaction:
        return Transaction(
            id=id if id is not None else next(counter),
            amount=Decimal(str(amount)),
            transaction_type=transaction_type,
            transaction_date=transaction_date,
            tags=tuple(tags),
        )

    return _make
