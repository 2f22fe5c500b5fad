"""Calendar Window - Pure functions for the 5-day display window.

All functions are pure: same input always produces same output, no side effects.
Dates are plain datetime.date values; no timezone round trips.
"""

from datetime import date, datetime, timedelta
from typing import Optional

from .models import CalendarDay, Period


WINDOW_DAYS = 5

DAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
DAY_FULL_LABELS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def local_date(timestamp: datetime) -> date:
    """Calendar date of a timestamp in local time.

    Naive timestamps are already local wall time.
    """
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone()
    return timestamp.date()


def week_start(day: date) -> date:
    """Monday of the ISO week containing day."""
    return day - timedelta(days=day.weekday())


def calendar_day(day: date) -> CalendarDay:
    """Describe a date with its real weekday labels."""
    weekday = day.weekday()
    return CalendarDay(
        label=DAY_LABELS[weekday],
        full_label=DAY_FULL_LABELS[weekday],
        calendar_date=day,
    )


def compute_window(active_period: Optional[Period], today: Optional[date] = None) -> list[CalendarDay]:
    """Compute the 5 consecutive days shown in the weekly views.

    Anchored to the active period's start date, or to the Monday of the
    current week when no period is active.

    Args:
        active_period: The resolved period, or None for "All Time"
        today: Reference date (defaults to today)

    Returns:
        Exactly 5 CalendarDay values, one day apart
    """
    if active_period is not None:
        anchor = active_period.start_date
    else:
        if today is None:
            today = date.today()
        anchor = week_start(today)

    return [calendar_day(anchor + timedelta(days=offset)) for offset in range(WINDOW_DAYS)]
