"""Daily Tallies - Pure functions for bucketing entries per window day.

All functions are pure: same input always produces same output, no side effects.
"""

from datetime import date
from typing import Optional

from .models import CalendarDay, DayTally, DrinkEntry
from .calendar import local_date


def _in_scope(entry: DrinkEntry, scope_period_id: Optional[str]) -> bool:
    return scope_period_id is None or entry.period_id == scope_period_id


def entries_on(
    entries: list[DrinkEntry], day: date, scope_period_id: Optional[str] = None
) -> list[DrinkEntry]:
    """Entries consumed on a calendar day, optionally limited to one period."""
    return [
        e for e in entries
        if local_date(e.timestamp) == day and _in_scope(e, scope_period_id)
    ]


def tally_day(day: CalendarDay, entries: list[DrinkEntry]) -> DayTally:
    """Count drinks by name and sum caffeine for one day's entries.

    Args:
        day: The window day being tallied
        entries: Entries already matched to that day

    Returns:
        DayTally with per-name counts and the day's caffeine total
    """
    counts: dict[str, int] = {}
    for entry in entries:
        counts[entry.drink_name] = counts.get(entry.drink_name, 0) + 1

    return DayTally(
        calendar_date=day.calendar_date,
        label=day.label,
        full_label=day.full_label,
        drink_counts=counts,
        total_caffeine=sum(e.caffeine_amount for e in entries),
        total_drinks=len(entries),
    )


def aggregate_by_day(
    entries: list[DrinkEntry],
    window: list[CalendarDay],
    scope_period_id: Optional[str] = None,
) -> list[DayTally]:
    """Build one tally per window day, in window order.

    Args:
        entries: Full entry collection (any order)
        window: Calendar window from compute_window
        scope_period_id: Only count entries of this period; None counts all

    Returns:
        List of DayTally, same length as window (empty days included)
    """
    # Group once so each entry is dated a single time
    by_date: dict[date, list[DrinkEntry]] = {}
    for entry in entries:
        if _in_scope(entry, scope_period_id):
            by_date.setdefault(local_date(entry.timestamp), []).append(entry)

    return [tally_day(day, by_date.get(day.calendar_date, [])) for day in window]


def count_drinks_on(
    entries: list[DrinkEntry], day: date, scope_period_id: Optional[str] = None
) -> int:
    """Number of drinks logged on a day (the caffeine meter reading)."""
    return len(entries_on(entries, day, scope_period_id))
