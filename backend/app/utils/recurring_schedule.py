"""
Date rollover for recurring invoice templates.

Month arithmetic clamps to the last day of the target month. When an anchor
day is given (the template's day_of_month) the result returns to that day as
soon as the month is long enough, so a 31st-of-month schedule runs
Jan 31 -> Feb 29 -> Mar 31 instead of drifting to the 29th.
"""

import calendar
from datetime import date, timedelta
from typing import Optional

from app.models.recurring_invoice import RecurringFrequency


MONTHS_PER_PERIOD = {
    RecurringFrequency.MONTHLY: 1,
    RecurringFrequency.QUARTERLY: 3,
    RecurringFrequency.YEARLY: 12,
}


def add_months(value: date, months: int, anchor_day: Optional[int] = None) -> date:
    """Add calendar months to `value`, clamping the day to the target month's length."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    day = anchor_day if anchor_day else value.day
    return date(year, month, min(day, last_day))


def calculate_next_date(
    current: date,
    frequency: RecurringFrequency,
    day_of_month: Optional[int] = None,
) -> date:
    """
    Next generation date, exactly one frequency unit after `current`.

    The step is always taken from the template's scheduled date, never from the
    day the job happens to run, so late runs do not shift the schedule.
    """
    frequency = RecurringFrequency(frequency)
    if frequency == RecurringFrequency.WEEKLY:
        return current + timedelta(days=7)
    return add_months(current, MONTHS_PER_PERIOD[frequency], anchor_day=day_of_month)
