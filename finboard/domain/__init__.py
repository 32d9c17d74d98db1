"""Domain models and calculations for finboard.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Business logic separated from infrastructure
"""

from finboard.domain.models import (
    DEFAULT_CATEGORY,
    DEFAULT_CURRENCY,
    CategoryName,
    ExpenseRecord,
    IncomeRecord,
    Month,
    SalarySplit,
    WealthRecord,
)

__all__ = [
    "Month",
    "CategoryName",
    "IncomeRecord",
    "ExpenseRecord",
    "WealthRecord",
    "SalarySplit",
    "DEFAULT_CATEGORY",
    "DEFAULT_CURRENCY",
]
