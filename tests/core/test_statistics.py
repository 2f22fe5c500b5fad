"""Unit tests for statistics - pure functions, no mocks needed."""

import math
from datetime import date, datetime

from caffeinelog.core.calendar import compute_window
from caffeinelog.core.models import (
    AllTimeScope,
    AllVisibleScope,
    DrinkEntry,
    Period,
    PeriodScope,
    YearScope,
)
from caffeinelog.core.statistics import compute_stats, scope_for_period, select_entries
from caffeinelog.core.tallies import aggregate_by_day


def entry(period_id, name, amount, timestamp):
    return DrinkEntry(period_id=period_id, drink_name=name, caffeine_amount=amount, timestamp=timestamp)


def sample_entries():
    return [
        entry("p1", "Coffee", 100, datetime(2025, 10, 1, 9, 0)),
        entry("p1", "Coffee", 100, datetime(2025, 10, 1, 20, 0)),
        entry("p1", "Tea", 40, datetime(2025, 10, 2, 10, 0)),
    ]


class TestComputeStats:
    """Tests for compute_stats."""

    def test_empty_is_zero(self):
        """No entries gives a zero snapshot."""
        stats = compute_stats([], PeriodScope(period_id="x"))

        assert stats.total_caffeine == 0
        assert stats.total_drinks == 0
        assert stats.unique_days == 0
        assert stats.avg_drinks_per_day == 0
        assert stats.avg_caffeine_per_day == 0

    def test_period_totals(self):
        """Coffee/Tea sample over two days."""
        stats = compute_stats(sample_entries(), PeriodScope(period_id="p1"))

        assert stats.total_caffeine == 240
        assert stats.total_drinks == 3
        assert stats.unique_days == 2
        assert stats.avg_drinks_per_day == 1.5
        assert stats.avg_caffeine_per_day == 120

    def test_unknown_period_is_zero(self):
        """An unknown period id selects nothing."""
        stats = compute_stats(sample_entries(), PeriodScope(period_id="missing"))
        assert stats.total_drinks == 0
        assert stats.avg_caffeine_per_day == 0

    def test_averages_not_rounded(self):
        """Averages keep full precision."""
        entries = [
            entry("p1", "Coffee", 100, datetime(2025, 10, 1, 9)),
            entry("p1", "Coffee", 100, datetime(2025, 10, 2, 9)),
            entry("p1", "Coffee", 100, datetime(2025, 10, 3, 9)),
            entry("p1", "Tea", 50, datetime(2025, 10, 3, 15)),
        ]
        stats = compute_stats(entries, PeriodScope(period_id="p1"))
        assert stats.avg_caffeine_per_day == 350 / 3
        assert stats.avg_drinks_per_day == 4 / 3

    def test_year_scope_ignores_period(self):
        """Yearly totals include every period in that year."""
        entries = sample_entries() + [
            entry("p2", "Coke", 34, datetime(2025, 3, 5, 12)),
            entry("p2", "Coke", 34, datetime(2024, 12, 31, 23, 59)),
        ]
        stats = compute_stats(entries, YearScope(year=2025))
        assert stats.total_drinks == 4
        assert stats.total_caffeine == 274
        assert stats.unique_days == 3

    def test_all_time_scope(self):
        """All-time scope takes every entry."""
        entries = sample_entries() + [entry("p2", "Coke", 34, datetime(2025, 3, 5, 12))]
        stats = compute_stats(entries, AllTimeScope())
        assert stats.total_drinks == 4


class TestAllVisibleScope:
    """Tests for the all-visible-periods scope."""

    def test_hidden_period_excluded(self):
        """Entries of hidden periods are left out."""
        periods = [
            Period(id="p1", name="Visible", start_date=date(2025, 10, 1), end_date=date(2025, 10, 31)),
            Period(id="p2", name="Hidden", start_date=date(2025, 9, 1), end_date=date(2025, 9, 30), hidden=True),
        ]
        entries = sample_entries() + [entry("p2", "Coke", 34, datetime(2025, 9, 3, 12))]
        stats = compute_stats(entries, AllVisibleScope(periods=periods))
        assert stats.total_drinks == 3
        assert stats.total_caffeine == 240

    def test_orphaned_entries_excluded(self):
        """Entries whose period was deleted are skipped without error."""
        periods = [Period(id="p2", name="Other", start_date=date(2025, 9, 1), end_date=date(2025, 9, 30))]
        stats = compute_stats(sample_entries(), AllVisibleScope(periods=periods))
        assert stats.total_drinks == 0
        assert stats.avg_drinks_per_day == 0

    def test_no_periods(self):
        """No periods at all gives zeros."""
        stats = compute_stats(sample_entries(), AllVisibleScope())
        assert stats.total_caffeine == 0


class TestUnvalidatedRecords:
    """Records that skipped validation still produce finite results."""

    def _negative_entry(self):
        return DrinkEntry.model_construct(
            id="bad",
            period_id="p1",
            drink_name="Coffee",
            caffeine_amount=-50,
            timestamp=datetime(2025, 10, 1, 9, 0),
        )

    def test_stats_do_not_raise(self):
        """A negative amount is summed as-is, averages stay finite."""
        stats = compute_stats([self._negative_entry()], PeriodScope(period_id="p1"))

        assert stats.total_caffeine == -50
        assert stats.total_drinks == 1
        assert stats.unique_days == 1
        assert stats.avg_caffeine_per_day == -50.0
        assert not math.isnan(stats.avg_drinks_per_day)

    def test_tallies_do_not_raise(self):
        """Daily tallies accept the record too."""
        period = Period(id="p1", name="October", start_date=date(2025, 10, 1), end_date=date(2025, 10, 2))
        tallies = aggregate_by_day([self._negative_entry()], compute_window(period), "p1")

        assert tallies[0].drink_counts == {"Coffee": 1}
        assert tallies[0].total_caffeine == -50

    def test_unmatched_scope_is_zero(self):
        """An unvalidated record outside the scope leaves a zero snapshot."""
        stats = compute_stats([self._negative_entry()], PeriodScope(period_id="other"))
        assert stats.avg_caffeine_per_day == 0
        assert stats.avg_drinks_per_day == 0


class TestScopeHelpers:
    """Tests for scope_for_period and select_entries."""

    def test_scope_for_none_is_all_time(self):
        """No active period means all entries."""
        assert isinstance(scope_for_period(None), AllTimeScope)

    def test_scope_for_period(self):
        """An active period maps to its own scope."""
        period = Period(id="p1", name="P", start_date=date(2025, 10, 1), end_date=date(2025, 10, 2))
        scope = scope_for_period(period)
        assert isinstance(scope, PeriodScope)
        assert scope.period_id == "p1"

    def test_select_preserves_order(self):
        """Selection keeps input order."""
        entries = sample_entries()
        assert select_entries(entries, PeriodScope(period_id="p1")) == entries
