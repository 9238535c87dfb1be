"""
Unit Tests for the plan schedule engine.

These tests verify:
1. Installment amounts and the remainder policy
2. Calendar-month due dates
3. Plan term validation
4. Start date parsing

Test Categories:
- test_split_*: Amount split tests
- test_due_dates_*: Date arithmetic tests
- test_validate_*: Parameter validation tests
- test_parse_*: Start date parsing tests
- test_schedule_*: Full schedule generation
"""

import pytest
from datetime import date

from credit_builder.service.schedule import (
    ScheduleSettings,
    add_months,
    build_schedule,
    calculate_monthly_amount,
    monthly_due_dates,
    parse_start_date,
    split_installments,
    validate_plan_terms,
)


# =============================================================================
# Installment Amount Tests
# =============================================================================

class TestInstallmentAmounts:
    """Tests for the monthly amount and remainder policy."""

    def test_monthly_amount_rounds_up(self):
        assert calculate_monthly_amount(50000, 12) == 4167
        assert calculate_monthly_amount(1200, 12) == 100

    def test_split_even_total(self):
        assert split_installments(1200, 12) == [100] * 12

    def test_split_last_installment_absorbs_difference(self):
        amounts = split_installments(50000, 12)

        assert amounts == [4167] * 11 + [4163]

    def test_split_single_month(self):
        assert split_installments(999, 1) == [999]

    def test_split_falls_back_to_even_spread(self):
        """100 over 60 would leave a negative last installment with ceiling amounts."""
        amounts = split_installments(100, 60)

        assert amounts == [2] * 40 + [1] * 20

    def test_split_one_cent_per_month(self):
        assert split_installments(12, 12) == [1] * 12

    @pytest.mark.parametrize(
        "total,term",
        [(50000, 12), (100, 60), (7, 7), (10001, 3), (59, 60 - 1), (123457, 24)],
    )
    def test_split_sums_to_total_with_positive_amounts(self, total, term):
        amounts = split_installments(total, term)

        assert len(amounts) == term
        assert sum(amounts) == total
        assert all(amount > 0 for amount in amounts)

    def test_split_rejects_invalid_terms(self):
        with pytest.raises(ValueError):
            split_installments(5, 12)

        with pytest.raises(ValueError):
            split_installments(1000, 0)


# =============================================================================
# Due Date Tests
# =============================================================================

class TestDueDates:
    """Tests for calendar-month due dates."""

    def test_due_dates_start_on_start_date(self):
        dates = monthly_due_dates(date(2025, 1, 15), 3)

        assert dates == [date(2025, 1, 15), date(2025, 2, 15), date(2025, 3, 15)]

    def test_due_dates_clamp_to_month_end(self):
        dates = monthly_due_dates(date(2025, 1, 31), 4)

        assert dates == [
            date(2025, 1, 31),
            date(2025, 2, 28),
            date(2025, 3, 31),
            date(2025, 4, 30),
        ]

    def test_due_dates_leap_year(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)

    def test_due_dates_cross_year(self):
        assert add_months(date(2025, 11, 30), 3) == date(2026, 2, 28)

    def test_due_dates_strictly_increase(self):
        dates = monthly_due_dates(date(2025, 8, 31), 24)

        assert all(a < b for a, b in zip(dates, dates[1:]))


# =============================================================================
# Validation Tests
# =============================================================================

class TestValidation:
    """Tests for plan parameter validation."""

    def test_validate_accepts_valid_terms(self):
        assert validate_plan_terms(50000, 12) == []

    def test_validate_rejects_non_positive_total(self):
        assert validate_plan_terms(0, 12)
        assert validate_plan_terms(-100, 12)

    def test_validate_rejects_term_out_of_bounds(self):
        assert validate_plan_terms(50000, 0)
        assert validate_plan_terms(50000, 61)

    def test_validate_rejects_non_integers(self):
        assert validate_plan_terms(100.5, 12)
        assert validate_plan_terms(True, 12)
        assert validate_plan_terms(1000, "12")

    def test_validate_rejects_total_below_term(self):
        errors = validate_plan_terms(11, 12)

        assert errors == [
            "total_amount_cents must cover at least 1 minor unit per installment "
            "(got 11 for 12 installments)"
        ]

    def test_validate_uses_custom_bounds(self):
        settings = ScheduleSettings(min_term_months=3, max_term_months=24)

        assert validate_plan_terms(50000, 2, settings)
        assert validate_plan_terms(50000, 25, settings)
        assert validate_plan_terms(50000, 24, settings) == []

    def test_settings_reject_inverted_bounds(self):
        with pytest.raises(ValueError):
            ScheduleSettings(min_term_months=12, max_term_months=6)


# =============================================================================
# Start Date Parsing Tests
# =============================================================================

class TestStartDateParsing:
    """Tests for start date parsing."""

    def test_parse_iso_date(self):
        assert parse_start_date("2025-01-15") == date(2025, 1, 15)

    def test_parse_browser_timestamp(self):
        assert parse_start_date("2025-01-15T08:30:00.000Z") == date(2025, 1, 15)

    def test_parse_date_passthrough(self):
        assert parse_start_date(date(2025, 1, 15)) == date(2025, 1, 15)

    @pytest.mark.parametrize("value", ["", "   ", "15/01/2025", "tomorrow", None])
    def test_parse_rejects_garbage(self, value):
        with pytest.raises(ValueError):
            parse_start_date(value)


# =============================================================================
# Schedule Generation Tests
# =============================================================================

class TestBuildSchedule:
    """Tests for full schedule generation."""

    def test_schedule_numbers_dates_and_amounts(self):
        schedule = build_schedule(50000, 12, date(2025, 1, 15))

        assert len(schedule) == 12
        assert [entry.installment_number for entry in schedule] == list(range(1, 13))
        assert schedule[0].due_date == date(2025, 1, 15)
        assert schedule[-1].due_date == date(2025, 12, 15)
        assert schedule[-1].amount_cents == 4163
        assert sum(entry.amount_cents for entry in schedule) == 50000

    def test_schedule_rejects_invalid_terms(self):
        with pytest.raises(ValueError):
            build_schedule(100, 61, date(2025, 1, 1))
