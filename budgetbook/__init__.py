"""
budgetbook - Source Package

Personal income/expense tracking: a hierarchical tag taxonomy, filtered
transaction views, balances over a date range and recurring transactions,
backed by a durable local record store.

DESIGN PRINCIPLES:
1. Money records are immutable once created
2. Reads degrade, writes fail loudly
3. Aggregation is a pure function of its input
4. Every write is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "budgetbook Team"
