"""Period Resolution - Pure functions for choosing the active period.

All functions are pure: same input always produces same output, no side effects.
"""

from typing import Optional

from .models import Period


def find_period(periods: list[Period], period_id: Optional[str]) -> Optional[Period]:
    """Look up a period by id, regardless of its hidden flag."""
    if not period_id:
        return None
    return next((p for p in periods if p.id == period_id), None)


def visible_periods(periods: list[Period]) -> list[Period]:
    """Periods shown in the selector, in collection order."""
    return [p for p in periods if not p.hidden]


def resolve_active_period(
    periods: list[Period], requested_id: Optional[str] = None
) -> Optional[Period]:
    """Determine the period the dashboard should scope to.

    A requested id wins even when that period is hidden. Without a request,
    the first period in collection order is used; its hidden flag is not
    consulted. None means "All Time".

    Args:
        periods: All periods in store iteration order
        requested_id: Period chosen by the user, if any

    Returns:
        The active Period, or None when nothing matches
    """
    if requested_id:
        return find_period(periods, requested_id)
    if periods:
        return periods[0]
    return None
