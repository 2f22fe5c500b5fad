"""MCP Server - Tool definitions for assistant integration.

Defines the MCP tools an assistant can invoke to log drinks and read
caffeine statistics. All persistence goes through the configured EntryStore.
"""

import logging
import os
from datetime import date, datetime

from pydantic import ValidationError
from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings

from ..core.models import ALL_TIME_LABEL, DrinkEntryInput, PeriodInput, YearScope
from ..core.periods import resolve_active_period, visible_periods
from ..core.reports import build_report
from ..core.statistics import compute_stats
from ..core.tallies import count_drinks_on, entries_on
from .storage import get_store


logger = logging.getLogger(__name__)


def _allowed_hosts() -> list[str]:
    hosts = ["localhost:*", "127.0.0.1:*"]
    extra = os.environ.get("MCP_ALLOWED_HOSTS", "")
    hosts.extend(h.strip() for h in extra.split(",") if h.strip())
    return hosts


transport_security = TransportSecuritySettings(
    enable_dns_rebinding_protection=True,
    allowed_hosts=_allowed_hosts(),
)

mcp = FastMCP(
    "caffeinelog",
    instructions="""Caffeine Log - Personal caffeine intake tracker.

Use these tools to log drinks, manage tracking periods, and report on
caffeine intake.

Drinks are always logged into a period; call list_periods first and
create_period if none exists. After logging, show today's count.""",
    stateless_http=True,
    transport_security=transport_security,
)


def _validation_message(error: ValidationError) -> str:
    return "; ".join(err["msg"] for err in error.errors())


# ==================== Period Tools ====================


@mcp.tool()
def list_periods(include_hidden: bool = False) -> list[dict]:
    """List tracking periods.

    Args:
        include_hidden: Also return periods hidden from the selector

    Returns:
        Periods with id, name, dates and hidden flag
    """
    periods = get_store().list_periods()
    if not include_hidden:
        periods = visible_periods(periods)
    return [p.model_dump(mode="json") for p in periods]


@mcp.tool()
def create_period(name: str, start_date: str, end_date: str) -> dict:
    """Create a named tracking period.

    Args:
        name: Display name (e.g., "October")
        start_date: First day in YYYY-MM-DD format
        end_date: Last day in YYYY-MM-DD format

    Returns:
        The created period, or an error
    """
    try:
        data = PeriodInput(name=name, start_date=start_date, end_date=end_date)
    except ValidationError as e:
        return {"error": f"Invalid period: {_validation_message(e)}"}

    period = get_store().create_period(data)
    if period is None:
        return {"error": "Failed to create period. Please try again."}
    return period.model_dump(mode="json")


# ==================== Logging Tools ====================


@mcp.tool()
def log_drink(
    drink_name: str,
    caffeine_amount: int,
    period_id: str | None = None,
    timestamp: str | None = None,
) -> dict:
    """Log a drink.

    Args:
        drink_name: Name of the drink (e.g., "Coffee")
        caffeine_amount: Caffeine in milligrams
        period_id: Target period (defaults to the first period)
        timestamp: ISO date-time of consumption (defaults to now)

    Returns:
        The created entry and the number of drinks logged today
    """
    store = get_store()
    period = resolve_active_period(store.list_periods(), period_id)
    if period is None:
        return {"error": "No period found. Use create_period first."}

    try:
        data = DrinkEntryInput(
            period_id=period.id,
            drink_name=drink_name,
            caffeine_amount=caffeine_amount,
            timestamp=datetime.fromisoformat(timestamp) if timestamp else None,
        )
    except ValueError as e:
        return {"error": f"Invalid drink entry: {e}"}

    entry = store.create_entry(data)
    if entry is None:
        return {"error": "Failed to log drink. Please try again."}

    return {
        "entry": entry.model_dump(mode="json"),
        "period": period.name,
        "drinks_today": count_drinks_on(store.list_entries(), date.today(), period.id),
    }


@mcp.tool()
def delete_drink(entry_id: str) -> dict:
    """Delete a drink entry.

    Args:
        entry_id: The ID of the entry to delete

    Returns:
        Confirmation or an error
    """
    if not get_store().delete_entry(entry_id):
        return {"error": "Entry not found or delete failed."}
    return {"success": True}


# ==================== Query Tools ====================


@mcp.tool()
def get_today(period_id: str | None = None) -> dict:
    """Get today's drinks for a period.

    Args:
        period_id: Period to scope to (defaults to the first period)

    Returns:
        Date, drink count, caffeine total and the entries
    """
    store = get_store()
    period = resolve_active_period(store.list_periods(), period_id)
    scope_id = period.id if period is not None else None
    today = date.today()

    entries = entries_on(store.list_entries(), today, scope_id)

    return {
        "date": today.isoformat(),
        "period": period.name if period is not None else ALL_TIME_LABEL,
        "drink_count": len(entries),
        "total_caffeine": sum(e.caffeine_amount for e in entries),
        "entries": [e.model_dump(mode="json") for e in entries],
    }


@mcp.tool()
def get_report(period_id: str | None = None) -> dict:
    """Generate the period report: statistics plus the 5-day calendar.

    Args:
        period_id: Period to report on (defaults to the first period)

    Returns:
        Report snapshot with period name, dates, statistics and daily tallies
    """
    store = get_store()
    report = build_report(store.list_periods(), store.list_entries(), period_id)
    return report.model_dump(mode="json")


@mcp.tool()
def get_yearly_stats(year: int | None = None) -> dict:
    """Get caffeine statistics for a calendar year, across all periods.

    Args:
        year: Calendar year (defaults to the current year)

    Returns:
        Totals and per-day averages for the year
    """
    if year is None:
        year = date.today().year
    stats = compute_stats(get_store().list_entries(), YearScope(year=year))
    return {"year": year, **stats.model_dump()}
