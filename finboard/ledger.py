"""CSV ledger loading for finboard.

Reads income, expense, wealth and item exports into the record shapes the
functional core expects. Dates are normalised to YYYY-MM-DD.
"""

import csv
import logging
import re
from pathlib import Path

import pandas as pd

from finboard.domain.allocation import parse_amount
from finboard.domain.models import ExpenseRecord, IncomeRecord, WealthRecord

logger = logging.getLogger(__name__)

ISO_DATE = re.compile(r"^\d{4}-\d{2}")


class LedgerError(ValueError):
    """Raised when a ledger file cannot be interpreted."""


def normalize_date(raw_date: str) -> str:
    """Normalize a date string to ISO format (YYYY-MM-DD).

    Uses pandas.to_datetime so exports in ISO or European (day first)
    formats all load. ISO dates are never read day first.

    Args:
        raw_date: Raw date string.

    Returns:
        Normalized date in YYYY-MM-DD format.

    Raises:
        ValueError: If date cannot be parsed.
    """
    try:
        value = raw_date.strip()
        parsed_date = pd.to_datetime(value, dayfirst=not ISO_DATE.match(value))
    except (ValueError, pd.errors.ParserError) as e:
        raise ValueError(f"Could not parse date '{raw_date}': {e}") from e

    if pd.isna(parsed_date):
        raise ValueError(f"Could not parse date '{raw_date}'")
    return parsed_date.strftime("%Y-%m-%d")


def read_rows(path: Path, required: list[str]) -> list[dict[str, str]]:
    """Read CSV rows, checking that the required columns exist.

    Args:
        path: CSV file path.
        required: Column names that must be present.

    Returns:
        List of rows as dictionaries.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        LedgerError: If a required column is missing.
    """
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        headers = reader.fieldnames or []

        missing = [column for column in required if column not in headers]
        if missing:
            raise LedgerError(f"{path}: missing column(s) {', '.join(missing)}")

        rows = list(reader)

    logger.debug("Read %d rows from %s", len(rows), path)
    return rows


def parse_row_date(path: Path, row_number: int, raw_date: str | None) -> str:
    """Normalize a row's date, wrapping failures in LedgerError."""
    try:
        return normalize_date(raw_date or "")
    except ValueError as e:
        raise LedgerError(f"{path}, row {row_number}: {e}") from e


def load_income_csv(path: Path) -> list[IncomeRecord]:
    """Load income rows (record_month, amount_eur)."""
    rows = read_rows(path, ["record_month", "amount_eur"])
    return [
        IncomeRecord(
            record_month=parse_row_date(path, i, row["record_month"]),
            amount_eur=parse_amount(row["amount_eur"]),
        )
        for i, row in enumerate(rows, start=2)
    ]


def load_expense_csv(path: Path) -> list[ExpenseRecord]:
    """Load expense rows (record_date, amount_eur, optional category)."""
    rows = read_rows(path, ["record_date", "amount_eur"])

    records: list[ExpenseRecord] = []
    for i, row in enumerate(rows, start=2):
        record = ExpenseRecord(
            record_date=parse_row_date(path, i, row["record_date"]),
            amount_eur=parse_amount(row["amount_eur"]),
        )
        category = (row.get("category") or "").strip()
        if category:
            record["category"] = category
        records.append(record)

    return records


def load_wealth_csv(path: Path) -> list[WealthRecord]:
    """Load account balance rows (record_date, amount_eur, optional account_id)."""
    rows = read_rows(path, ["record_date", "amount_eur"])

    records: list[WealthRecord] = []
    for i, row in enumerate(rows, start=2):
        record = WealthRecord(
            record_date=parse_row_date(path, i, row["record_date"]),
            amount_eur=parse_amount(row["amount_eur"]),
        )
        account_id = (row.get("account_id") or "").strip()
        if account_id:
            record["account_id"] = account_id
        records.append(record)

    return records


def load_items_csv(path: Path, name_field: str) -> list[dict[str, str]]:
    """Load raw item rows for merging (name field, amount, currency).

    Amounts stay as strings; merging parses them.
    """
    rows = read_rows(path, [name_field, "amount"])
    return [
        {
            name_field: row[name_field] or "",
            "amount": row["amount"] or "",
            "currency": (row.get("currency") or "").strip(),
        }
        for row in rows
    ]
