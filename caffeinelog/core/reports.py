"""Report Generation - Pure functions for generating reports.

All functions are pure: same input always produces same output, no side effects.
"""

from datetime import date, datetime
from typing import Optional

from .models import (
    ALL_TIME_LABEL,
    CalendarDay,
    DayTally,
    DrinkEntry,
    Period,
    ReportSnapshot,
    StatisticsSnapshot,
)
from .periods import resolve_active_period
from .calendar import compute_window
from .tallies import aggregate_by_day
from .statistics import compute_stats, scope_for_period


def assemble_report(
    active_period: Optional[Period],
    statistics: StatisticsSnapshot,
    window: list[CalendarDay],
    daily: Optional[list[DayTally]] = None,
    now: Optional[datetime] = None,
) -> ReportSnapshot:
    """Compose a report snapshot from already-computed parts.

    Args:
        active_period: The resolved period, or None for "All Time"
        statistics: Statistics for the active scope
        window: Calendar window being displayed
        daily: Day tallies for the window, if computed
        now: Reference time used as the range when no period is active

    Returns:
        Immutable ReportSnapshot
    """
    if active_period is not None:
        period_name = active_period.name
        start_date = active_period.start_date
        end_date = active_period.end_date
    else:
        if now is None:
            now = datetime.now()
        period_name = ALL_TIME_LABEL
        start_date = end_date = now.date()

    return ReportSnapshot(
        period_name=period_name,
        start_date=start_date,
        end_date=end_date,
        statistics=statistics,
        window=tuple(window),
        daily=tuple(daily or ()),
    )


def build_report(
    periods: list[Period],
    entries: list[DrinkEntry],
    requested_id: Optional[str] = None,
    today: Optional[date] = None,
) -> ReportSnapshot:
    """Run the full pipeline from raw store snapshots to a report.

    Args:
        periods: All periods in store order
        entries: All drink entries
        requested_id: Period selected by the user, if any
        today: Reference date (defaults to today)

    Returns:
        ReportSnapshot for the resolved period
    """
    if today is None:
        today = date.today()

    active_period = resolve_active_period(periods, requested_id)
    window = compute_window(active_period, today)
    scope_id = active_period.id if active_period is not None else None
    daily = aggregate_by_day(entries, window, scope_id)
    statistics = compute_stats(entries, scope_for_period(active_period))

    return assemble_report(
        active_period,
        statistics,
        window,
        daily=daily,
        now=datetime.combine(today, datetime.min.time()),
    )
