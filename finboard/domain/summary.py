"""Pure functions for monthly summaries, growth and spending insights.

This module contains the functional core for the dashboard:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

All amounts are in EUR as floats. Every function here is total: edge cases
return a defined value (0, None) instead of raising.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Literal

from finboard.dates import month_key
from finboard.domain.models import (
    DEFAULT_CATEGORY,
    CategoryName,
    ExpenseRecord,
    IncomeRecord,
    Month,
    WealthRecord,
)

# Percentage thresholds for spending insights
CATEGORY_WARNING_THRESHOLD = 20
SAVINGS_SUCCESS_THRESHOLD = 10
EXPENSE_DROP_THRESHOLD = -10

InsightType = Literal["warning", "success", "info"]


@dataclass(frozen=True)
class MonthlyData:
    """Immutable income and expense totals for one month."""

    month: Month
    income: float = 0.0
    expenses: float = 0.0
    categories: dict[CategoryName, float] = field(default_factory=dict)


@dataclass(frozen=True)
class WealthGrowth:
    """Immutable wealth snapshot summary."""

    total_assets: float
    growth: float


@dataclass(frozen=True)
class SpendingInsight:
    """Immutable insight comparing two months."""

    text: str
    type: InsightType


def percentage_change(current: float, previous: float) -> float:
    """Calculate percentage change between two values.

    The denominator is the absolute previous value, so going from -10 to 10
    reads as +200%.

    Args:
        current: Current value.
        previous: Baseline value.

    Returns:
        Percentage change, or 0 when there is no baseline (previous == 0).
    """
    if previous == 0:
        return 0.0
    return ((current - previous) / abs(previous)) * 100


def round_percent(value: float) -> int:
    """Round a percentage to a whole number with halves rounded up.

    Insight texts show 22.5% as 23%, where round() would give 22.
    """
    return math.floor(value + 0.5)


def aggregate_monthly_data(
    income_records: Iterable[IncomeRecord],
    expense_records: Iterable[ExpenseRecord],
) -> list[MonthlyData]:
    """Aggregate income and expense rows into monthly totals.

    Expenses without a category are counted under DEFAULT_CATEGORY.

    Args:
        income_records: Rows with record_month and amount_eur.
        expense_records: Rows with record_date, amount_eur and optional category.

    Returns:
        One MonthlyData per month present in either input, sorted by month.
    """
    income: dict[Month, float] = {}
    expenses: dict[Month, float] = {}
    categories: dict[Month, dict[CategoryName, float]] = {}

    for item in income_records:
        month = month_key(item["record_month"])
        income[month] = income.get(month, 0.0) + float(item["amount_eur"])
        expenses.setdefault(month, 0.0)
        categories.setdefault(month, {})

    for item in expense_records:
        month = month_key(item["record_date"])
        amount = float(item["amount_eur"])
        income.setdefault(month, 0.0)
        expenses[month] = expenses.get(month, 0.0) + amount

        category = CategoryName(item.get("category") or DEFAULT_CATEGORY)
        month_categories = categories.setdefault(month, {})
        month_categories[category] = month_categories.get(category, 0.0) + amount

    return [
        MonthlyData(
            month=month,
            income=income[month],
            expenses=expenses[month],
            categories=categories[month],
        )
        for month in sorted(income)
    ]


def latest_monthly_totals(
    income_records: Iterable[IncomeRecord],
    expense_records: Iterable[ExpenseRecord],
) -> tuple[float, float]:
    """Get income and expense totals of their respective latest months.

    The latest income month and the latest expense month are picked
    independently, so a month with expenses but no salary yet does not
    zero out the income side.

    Args:
        income_records: Income rows.
        expense_records: Expense rows.

    Returns:
        Tuple of (latest_income_total, latest_expense_total).
    """
    income: dict[Month, float] = {}
    for item in income_records:
        month = month_key(item["record_month"])
        income[month] = income.get(month, 0.0) + float(item["amount_eur"])

    expenses: dict[Month, float] = {}
    for item in expense_records:
        month = month_key(item["record_date"])
        expenses[month] = expenses.get(month, 0.0) + float(item["amount_eur"])

    latest_income = income[max(income)] if income else 0.0
    latest_expenses = expenses[max(expenses)] if expenses else 0.0

    return latest_income, latest_expenses


def wealth_growth(wealth_records: Iterable[WealthRecord]) -> WealthGrowth:
    """Calculate total assets and growth since the previous snapshot.

    Balances recorded on the same date are summed together.

    Args:
        wealth_records: Rows with record_date and amount_eur.

    Returns:
        WealthGrowth for the latest date. Zero for empty input.
    """
    totals_by_date: dict[str, float] = {}
    for item in wealth_records:
        date = item["record_date"]
        totals_by_date[date] = totals_by_date.get(date, 0.0) + float(item["amount_eur"])

    if not totals_by_date:
        return WealthGrowth(total_assets=0.0, growth=0.0)

    sorted_dates = sorted(totals_by_date)
    total_assets = totals_by_date[sorted_dates[-1]]
    previous_total = totals_by_date[sorted_dates[-2]] if len(sorted_dates) > 1 else total_assets

    return WealthGrowth(
        total_assets=total_assets,
        growth=percentage_change(total_assets, previous_total),
    )


def find_category_increase(
    latest_month: MonthlyData,
    prev_month: MonthlyData,
) -> tuple[CategoryName, float] | None:
    """Find the first category whose spending rose above the warning threshold.

    Categories are checked in the order they appear in latest_month, and the
    first match wins even if a later category rose more.

    Args:
        latest_month: Month to evaluate.
        prev_month: Month to compare against.

    Returns:
        Tuple of (category, percentage) or None.
    """
    for category, amount in latest_month.categories.items():
        prev_amount = prev_month.categories.get(category, 0.0)
        if prev_amount > 0:
            diff = percentage_change(amount, prev_amount)
            if diff > CATEGORY_WARNING_THRESHOLD:
                return category, diff

    return None


def spending_insight(
    latest_month: MonthlyData,
    prev_month: MonthlyData,
) -> SpendingInsight | None:
    """Generate a spending insight comparing two months.

    Checks, in order: a category spending jump (warning), a savings increase
    (success), then an overall expense drop (success).

    Args:
        latest_month: Month to evaluate.
        prev_month: Month to compare against.

    Returns:
        SpendingInsight, or None when nothing notable changed.
    """
    increase = find_category_increase(latest_month, prev_month)
    if increase is not None:
        category, diff = increase
        return SpendingInsight(
            text=f"Tento mesiac míňaš o {round_percent(diff)}% viac na {category.lower()} ako minulý mesiac.",
            type="warning",
        )

    latest_savings = latest_month.income - latest_month.expenses
    prev_savings = prev_month.income - prev_month.expenses
    savings_change = percentage_change(latest_savings, prev_savings)

    if savings_change > SAVINGS_SUCCESS_THRESHOLD:
        return SpendingInsight(
            text=f"Skvelá práca! Tento mesiac si ušetril o {round_percent(savings_change)}% viac ako naposledy.",
            type="success",
        )

    expense_change = percentage_change(latest_month.expenses, prev_month.expenses)

    if expense_change < EXPENSE_DROP_THRESHOLD:
        return SpendingInsight(
            text=f"Tvoje výdavky klesli o {round_percent(abs(expense_change))}%. Len tak ďalej!",
            type="success",
        )

    return None
