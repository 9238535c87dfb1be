"""
Plan & Schedule Engine for credit-builder plans
"""

from .settings import ScheduleSettings, schedule_settings
from .installments import (
    calculate_monthly_amount,
    split_installments,
    validate_plan_terms,
)
from .calendar import add_months, monthly_due_dates, parse_start_date
from .schedule import ScheduleEntry, build_schedule

__all__ = [
    # Settings
    "ScheduleSettings",
    "schedule_settings",
    # Amounts
    "calculate_monthly_amount",
    "split_installments",
    "validate_plan_terms",
    # Dates
    "add_months",
    "monthly_due_dates",
    "parse_start_date",
    # Schedule
    "ScheduleEntry",
    "build_schedule",
]
