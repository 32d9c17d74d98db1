"""Pure functions for salary splits and merging duplicated item rows.

No I/O, no side effects. Amounts are in the row's own currency.
"""

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from finboard.domain.models import DEFAULT_CURRENCY, SalarySplit

# Salary buckets in display order: (split key, display name)
SALARY_BUCKETS: list[tuple[str, str]] = [
    ("fixed_costs", "Fixné náklady (Domácnosť, účty)"),
    ("investments", "Investície (ETF, Akcie)"),
    ("savings", "Krátkodobé sporenie (Rezerva)"),
    ("fun", "Zábava a radosť"),
]


@dataclass(frozen=True)
class SalaryAllocation:
    """Immutable share of a salary assigned to one bucket."""

    key: str
    name: str
    percent: float
    amount: float


def salary_allocation(salary: float, split: SalarySplit | Mapping[str, float]) -> list[SalaryAllocation]:
    """Split a salary into the four fixed buckets.

    Percentages are not checked to sum to 100. A missing bucket counts as 0.

    Args:
        salary: Monthly salary.
        split: Percentage per bucket.

    Returns:
        Four SalaryAllocation entries: fixed costs, investments, savings, fun.
    """
    shares: Mapping[str, float] = split
    return [
        SalaryAllocation(
            key=key,
            name=name,
            percent=shares.get(key, 0.0),
            amount=(salary * shares.get(key, 0.0)) / 100,
        )
        for key, name in SALARY_BUCKETS
    ]


def parse_amount(value: Any) -> float:
    """Parse an amount leniently.

    Args:
        value: Number or numeric string (may be None or garbage).

    Returns:
        Parsed float, or 0.0 when the value is empty, invalid or NaN.
    """
    if value is None:
        return 0.0

    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0

    if math.isnan(amount):
        return 0.0
    return amount


def merge_by_name(items: Iterable[Mapping[str, Any]], name_field: str) -> list[dict[str, Any]]:
    """Merge rows that share the same name, summing their amounts.

    Names are trimmed but compared case-sensitively, so "Tatra Banka" and
    "tatra banka" stay separate. Rows with an empty name are dropped. The
    first currency seen for a name is kept.

    Args:
        items: Rows with the name field, "amount" and "currency".
        name_field: Key holding the name (e.g., "accountName").

    Returns:
        Merged rows in first-seen order, with amount as float.
    """
    merged: dict[str, dict[str, Any]] = {}

    for item in items:
        name = str(item.get(name_field) or "").strip()
        if not name:
            continue

        if name not in merged:
            merged[name] = {
                name_field: name,
                "amount": 0.0,
                "currency": item.get("currency") or DEFAULT_CURRENCY,
            }
        merged[name]["amount"] += parse_amount(item.get("amount"))

    return list(merged.values())


def merge_asset_items(items: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
    """Merge asset rows by account name."""
    return merge_by_name(items, "accountName")


def merge_income_items(items: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
    """Merge income rows by category name."""
    return merge_by_name(items, "categoryName")
