"""Statistics - Pure functions for period, visible-period and yearly totals.

All functions are pure: same input always produces same output, no side effects.
"""

from typing import Optional

from .models import (
    AllTimeScope,
    AllVisibleScope,
    DrinkEntry,
    Period,
    PeriodScope,
    ScopeSelector,
    StatisticsSnapshot,
    YearScope,
)
from .calendar import local_date


def scope_for_period(active_period: Optional[Period]) -> ScopeSelector:
    """Scope matching the dashboard: the active period, else everything."""
    if active_period is None:
        return AllTimeScope()
    return PeriodScope(period_id=active_period.id)


def select_entries(entries: list[DrinkEntry], scope: ScopeSelector) -> list[DrinkEntry]:
    """Filter entries down to the subset a scope selects.

    Unknown period ids and orphaned entries simply select nothing.

    Args:
        entries: Full entry collection
        scope: Subset-selection rule

    Returns:
        The selected entries, in input order
    """
    if isinstance(scope, PeriodScope):
        return [e for e in entries if e.period_id == scope.period_id]
    if isinstance(scope, AllVisibleScope):
        visible_ids = {p.id for p in scope.periods if not p.hidden}
        return [e for e in entries if e.period_id in visible_ids]
    if isinstance(scope, YearScope):
        return [e for e in entries if local_date(e.timestamp).year == scope.year]
    if isinstance(scope, AllTimeScope):
        return list(entries)
    raise TypeError(f"Unsupported scope: {scope!r}")


def calculate_totals(entries: list[DrinkEntry]) -> tuple[int, int, int]:
    """Calculate caffeine, drink count and distinct days for entries.

    Returns:
        Tuple of (total_caffeine, total_drinks, unique_days)
    """
    total_caffeine = sum(e.caffeine_amount for e in entries)
    unique_days = len({local_date(e.timestamp) for e in entries})
    return total_caffeine, len(entries), unique_days


def compute_stats(entries: list[DrinkEntry], scope: ScopeSelector) -> StatisticsSnapshot:
    """Compute the statistics snapshot for the entries a scope selects.

    Averages are per distinct logged day and are 0 when no day is logged.

    Args:
        entries: Full entry collection
        scope: Period, all-visible, year or all-time selector

    Returns:
        StatisticsSnapshot (all zeros for an empty subset)
    """
    total_caffeine, total_drinks, unique_days = calculate_totals(select_entries(entries, scope))

    avg_drinks = total_drinks / unique_days if unique_days > 0 else 0.0
    avg_caffeine = total_caffeine / unique_days if unique_days > 0 else 0.0

    return StatisticsSnapshot(
        total_caffeine=total_caffeine,
        total_drinks=total_drinks,
        unique_days=unique_days,
        avg_drinks_per_day=avg_drinks,
        avg_caffeine_per_day=avg_caffeine,
    )
