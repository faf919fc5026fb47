"""
Recurring invoice date rollover tests.
"""

from datetime import date

import pytest

from app.models.recurring_invoice import RecurringFrequency
from app.utils.recurring_schedule import add_months, calculate_next_date


@pytest.mark.parametrize(
    "current,frequency,expected",
    [
        (date(2024, 3, 1), RecurringFrequency.WEEKLY, date(2024, 3, 8)),
        (date(2024, 12, 28), RecurringFrequency.WEEKLY, date(2025, 1, 4)),
        (date(2024, 3, 15), RecurringFrequency.MONTHLY, date(2024, 4, 15)),
        (date(2024, 11, 15), RecurringFrequency.QUARTERLY, date(2025, 2, 15)),
        (date(2024, 6, 1), RecurringFrequency.YEARLY, date(2025, 6, 1)),
    ],
)
def test_calculate_next_date(current, frequency, expected):
    assert calculate_next_date(current, frequency) == expected


def test_accepts_raw_frequency_values():
    assert calculate_next_date(date(2024, 1, 10), "MONTHLY") == date(2024, 2, 10)


def test_month_end_clamps_to_shorter_month():
    assert calculate_next_date(date(2024, 1, 31), RecurringFrequency.MONTHLY) == date(2024, 2, 29)
    assert calculate_next_date(date(2023, 1, 31), RecurringFrequency.MONTHLY) == date(2023, 2, 28)
    assert calculate_next_date(date(2024, 2, 29), RecurringFrequency.YEARLY) == date(2025, 2, 28)


def test_anchor_day_returns_after_short_month():
    feb = calculate_next_date(date(2024, 1, 31), RecurringFrequency.MONTHLY, day_of_month=31)
    mar = calculate_next_date(feb, RecurringFrequency.MONTHLY, day_of_month=31)

    assert feb == date(2024, 2, 29)
    assert mar == date(2024, 3, 31)


def test_without_anchor_clamped_day_carries_forward():
    feb = calculate_next_date(date(2024, 1, 31), RecurringFrequency.MONTHLY)
    assert calculate_next_date(feb, RecurringFrequency.MONTHLY) == date(2024, 3, 29)


def test_quarterly_with_anchor():
    assert calculate_next_date(date(2024, 11, 30), RecurringFrequency.QUARTERLY, day_of_month=30) == date(2025, 2, 28)


def test_add_months_across_years():
    assert add_months(date(2024, 12, 15), 1) == date(2025, 1, 15)
    assert add_months(date(2024, 1, 15), 24) == date(2026, 1, 15)
