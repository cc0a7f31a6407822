"""Billing period arithmetic."""
from datetime import datetime

from dateutil.relativedelta import relativedelta


def add_months(start: datetime, months: int) -> datetime:
    """Shift by whole months, clamping the day to the target month's length.

    Jan 31 + 1 month is Feb 28 (or 29), never a date in March.
    """
    return start + relativedelta(months=months)


def period_end(start: datetime, interval_type: str, interval_count: int) -> datetime:
    """End of a billing period of interval_count months or years."""
    if interval_type == "month":
        return add_months(start, interval_count)
    if interval_type == "year":
        return start + relativedelta(years=interval_count)
    raise ValueError(f"Unknown billing interval: {interval_type}")
