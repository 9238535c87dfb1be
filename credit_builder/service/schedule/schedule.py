"""Payment schedule generation."""

from dataclasses import dataclass
from datetime import date
from typing import List

from .calendar import monthly_due_dates
from .installments import split_installments


@dataclass(frozen=True)
class ScheduleEntry:
    """One installment of a generated schedule."""

    installment_number: int
    due_date: date
    amount_cents: int


def build_schedule(
    total_amount_cents: int,
    term_months: int,
    start_date: date,
) -> List[ScheduleEntry]:
    """
    Generate the full installment schedule for a plan.

    Args:
        total_amount_cents: Plan total in minor units
        term_months: Number of monthly installments
        start_date: Due date of the first installment

    Returns:
        `term_months` entries whose amounts sum to the total, due one
        calendar month apart

    Raises:
        ValueError: If the parameters are invalid
    """
    amounts = split_installments(total_amount_cents, term_months)
    due_dates = monthly_due_dates(start_date, term_months)

    return [
        ScheduleEntry(
            installment_number=i + 1,
            due_date=due_date,
            amount_cents=amount,
        )
        for i, (due_date, amount) in enumerate(zip(due_dates, amounts))
    ]
