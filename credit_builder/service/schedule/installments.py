"""
Installment amount calculation for credit-builder plans.

Remainder policy:
    monthly = ceil(total / term). The first term-1 installments are
    `monthly` and the last one takes whatever is left, so the schedule
    never collects more than the total. When that leftover would be zero
    or negative (tiny totals over long terms, e.g. 100 over 60), the total
    is instead split evenly with the remainder spread one unit at a time
    over the earliest installments.

Example:
    50000 over 12 -> 11 x 4167 + 4163
"""

from typing import List

from .settings import ScheduleSettings, schedule_settings


def validate_plan_terms(
    total_amount_cents: int,
    term_months: int,
    settings: ScheduleSettings = schedule_settings,
) -> List[str]:
    """
    Check plan parameters against the schedule rules.

    Returns:
        List of human-readable problems, empty when valid
    """
    errors = []

    if isinstance(total_amount_cents, bool) or not isinstance(total_amount_cents, int):
        errors.append("total_amount_cents must be an integer")
    elif total_amount_cents <= 0:
        errors.append("total_amount_cents must be positive")

    if isinstance(term_months, bool) or not isinstance(term_months, int):
        errors.append("term_months must be an integer")
    elif not settings.min_term_months <= term_months <= settings.max_term_months:
        errors.append(
            f"term_months must be between {settings.min_term_months} "
            f"and {settings.max_term_months}"
        )

    if not errors and total_amount_cents < term_months:
        errors.append(
            "total_amount_cents must cover at least 1 minor unit per installment "
            f"(got {total_amount_cents} for {term_months} installments)"
        )

    return errors


def calculate_monthly_amount(total_amount_cents: int, term_months: int) -> int:
    """Monthly installment: ceiling of total / term."""
    return -(-total_amount_cents // term_months)


def split_installments(total_amount_cents: int, term_months: int) -> List[int]:
    """
    Split a total into `term_months` positive installments summing to the total.

    Args:
        total_amount_cents: Plan total in minor units
        term_months: Number of installments

    Returns:
        Installment amounts in schedule order

    Raises:
        ValueError: If the parameters are invalid
    """
    errors = validate_plan_terms(total_amount_cents, term_months)
    if errors:
        raise ValueError("; ".join(errors))

    monthly = calculate_monthly_amount(total_amount_cents, term_months)
    last = total_amount_cents - monthly * (term_months - 1)

    if last > 0:
        return [monthly] * (term_months - 1) + [last]

    base, remainder = divmod(total_amount_cents, term_months)
    return [base + 1 if i < remainder else base for i in range(term_months)]
