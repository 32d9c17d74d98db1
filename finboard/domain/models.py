"""Domain type definitions for finboard.

These NewTypes and TypedDicts describe the ledger rows the functional core
consumes:
- Month: Month in YYYY-MM format
- CategoryName: Name of an expense or income category
- IncomeRecord / ExpenseRecord / WealthRecord: rows as fetched from storage
"""

from typing import NewType, NotRequired, TypedDict

# Month is always in YYYY-MM format (e.g., "2025-01")
Month = NewType("Month", str)

# Category name for expense categories
CategoryName = NewType("CategoryName", str)

# Fallbacks used when a row leaves the field empty
DEFAULT_CATEGORY = CategoryName("Ostatné")
DEFAULT_CURRENCY = "EUR"


class IncomeRecord(TypedDict):
    """Income row for a month."""

    record_month: str
    amount_eur: float


class ExpenseRecord(TypedDict):
    """Single expense row."""

    record_date: str
    amount_eur: float
    category: NotRequired[str]


class WealthRecord(TypedDict):
    """Account balance snapshot."""

    record_date: str
    amount_eur: float
    account_id: NotRequired[str]


class SalarySplit(TypedDict):
    """Percentages of a salary per bucket (expected to sum to 100)."""

    fixed_costs: float
    investments: float
    savings: float
    fun: float
