"""Calendar-month date arithmetic for payment schedules."""

from datetime import date, datetime
from typing import List

from dateutil.relativedelta import relativedelta


def add_months(start: date, months: int) -> date:
    """
    Add calendar months, clamping to the last day of shorter months.

    Jan 31 + 1 month is Feb 28 (or 29), not Mar 2 or 3.
    """
    return start + relativedelta(months=months)


def monthly_due_dates(start: date, term_months: int) -> List[date]:
    """Due dates at start + k months for k = 0..term_months-1."""
    return [add_months(start, k) for k in range(term_months)]


def parse_start_date(value: date | str) -> date:
    """
    Parse a plan start date.

    Accepts a date, an ISO date (YYYY-MM-DD), or an ISO timestamp such as
    the ones browsers produce with toISOString().

    Raises:
        ValueError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid start date: {value!r}")

    text = value.strip()
    if "T" in text:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    return date.fromisoformat(text)
