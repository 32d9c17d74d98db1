"""Pure functions for FIRE (Financial Independence, Retire Early) planning.

This module contains the functional core for the FIRE calculator:
- No I/O operations
- No side effects
- Pure data transformations

Rates passed to months_to_fire are monthly fractions (0.005 = 0.5%);
everything suffixed with _percent is a percentage.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass

from finboard.domain.models import WealthRecord

# 100 years; months_to_fire saturates here
MAX_FIRE_MONTHS = 1200


@dataclass(frozen=True)
class ProjectionPoint:
    """Immutable net worth projection at the start of a year."""

    year: int
    net_worth: float
    target: float


@dataclass(frozen=True)
class FireSimulation:
    """Immutable FIRE simulation result."""

    fire_target: float
    annual_expenses: float
    monthly_savings: float
    months_to_fire: int | None
    projection: list[ProjectionPoint]


def fire_target(monthly_expenses: float, swr_percent: float = 4) -> float:
    """Calculate the net worth needed to retire.

    Args:
        monthly_expenses: Expected monthly spending.
        swr_percent: Safe withdrawal rate in percent per year.

    Returns:
        Target net worth, or 0 when either input is not positive.
    """
    if monthly_expenses <= 0 or swr_percent <= 0:
        return 0.0
    return (monthly_expenses * 12) / (swr_percent / 100)


def months_to_fire(
    current_net_worth: float,
    monthly_savings: float,
    monthly_return_rate: float,
    target_amount: float,
) -> float:
    """Count months of saving and compounding until the target is reached.

    Each month applies net_worth = (net_worth + savings) * (1 + rate).

    Args:
        current_net_worth: Starting net worth.
        monthly_savings: Amount added each month.
        monthly_return_rate: Monthly return as a fraction.
        target_amount: Net worth to reach.

    Returns:
        Number of months. 0 if already at target, math.inf if neither savings
        nor returns are positive. Capped at MAX_FIRE_MONTHS.
    """
    if current_net_worth >= target_amount:
        return 0
    if monthly_savings <= 0 and monthly_return_rate <= 0:
        return math.inf

    months = 0
    net_worth = current_net_worth

    while net_worth < target_amount and months < MAX_FIRE_MONTHS:
        net_worth = (net_worth + monthly_savings) * (1 + monthly_return_rate)
        months += 1

    return months


def latest_account_balances(wealth_records: Iterable[WealthRecord]) -> float:
    """Sum each account's balance at its own latest snapshot date.

    Rows without an account_id are grouped together.

    Args:
        wealth_records: Rows with record_date, amount_eur and account_id.

    Returns:
        Total of latest balances across accounts.
    """
    records = list(wealth_records)

    latest_dates: dict[str, str] = {}
    for item in records:
        account = item.get("account_id", "")
        if account not in latest_dates or item["record_date"] > latest_dates[account]:
            latest_dates[account] = item["record_date"]

    return sum(
        float(item["amount_eur"])
        for item in records
        if item["record_date"] == latest_dates[item.get("account_id", "")]
    )


def simulate_fire(
    net_worth: float,
    monthly_expenses: float,
    monthly_savings: float,
    swr_percent: float = 4,
    annual_return_percent: float = 7,
    max_years: int = 50,
) -> FireSimulation:
    """Project net worth year by year towards the FIRE target.

    Negative savings contribute nothing. A projection point is recorded at
    the start of every year, with net worth floored at 0.

    Args:
        net_worth: Current net worth (assets minus debt).
        monthly_expenses: Expected monthly spending.
        monthly_savings: Amount saved each month.
        swr_percent: Safe withdrawal rate in percent per year.
        annual_return_percent: Expected yearly return in percent.
        max_years: Length of the projection.

    Returns:
        FireSimulation. months_to_fire is None when the target is not reached
        within max_years.
    """
    annual_expenses = monthly_expenses * 12
    target = annual_expenses / (swr_percent / 100) if swr_percent > 0 else 0.0
    monthly_rate = annual_return_percent / 100 / 12
    contribution = max(monthly_savings, 0)
    max_months = max_years * 12

    projection: list[ProjectionPoint] = []
    current = net_worth
    months_below = 0

    for month in range(max_months + 1):
        if month % 12 == 0:
            projection.append(ProjectionPoint(year=month // 12, net_worth=max(0.0, current), target=target))

        if current < target:
            months_below += 1

        current = (current + contribution) * (1 + monthly_rate)

    return FireSimulation(
        fire_target=target,
        annual_expenses=annual_expenses,
        monthly_savings=monthly_savings,
        months_to_fire=None if months_below > max_months else months_below,
        projection=projection,
    )


def split_duration(months: int) -> tuple[int, int]:
    """Split a month count into (years, months)."""
    return divmod(months, 12)
