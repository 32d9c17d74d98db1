"""Date utilities for finboard.

Pure functions for month keys and labels.
"""

from datetime import datetime

from finboard.domain.models import Month


def month_key(date_string: str) -> Month:
    """Derive the month key of a date string.

    The key is the first 7 characters, so "2025-01-15" and "2025-01-01"
    both map to "2025-01". No calendar validation happens here.

    Args:
        date_string: ISO-like date (YYYY-MM-DD or YYYY-MM).

    Returns:
        Month in YYYY-MM format.
    """
    return Month(date_string[:7])


def month_label(month: Month) -> str:
    """Format a month for display.

    Args:
        month: Month in YYYY-MM format.

    Returns:
        Human-readable month (e.g., "January 2025").

    Raises:
        ValueError: If month is not in YYYY-MM format.
    """
    dt = datetime.strptime(month, "%Y-%m")
    return dt.strftime("%B %Y")
