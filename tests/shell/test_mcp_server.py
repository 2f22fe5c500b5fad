"""Tests for MCP tools, called directly against an in-memory store."""

import pytest
from datetime import date, datetime

from caffeinelog.shell import mcp_server
from caffeinelog.shell.storage import InMemoryStore, set_store


@pytest.fixture
def store():
    memory = InMemoryStore()
    set_store(memory)
    yield memory
    set_store(None)


class TestPeriodTools:
    """Tests for list_periods and create_period."""

    def test_create_and_list(self, store):
        """Created periods are listed; hidden ones only on request."""
        created = mcp_server.create_period("October", "2025-10-01", "2025-10-31")
        assert created["name"] == "October"

        store.set_period_hidden(created["id"], True)
        assert mcp_server.list_periods() == []
        assert len(mcp_server.list_periods(include_hidden=True)) == 1

    def test_create_invalid(self, store):
        """Backwards ranges are reported as errors."""
        result = mcp_server.create_period("Bad", "2025-10-31", "2025-10-01")
        assert "error" in result


class TestLoggingTools:
    """Tests for log_drink and delete_drink."""

    def test_log_requires_period(self, store):
        """Logging without any period is an error."""
        assert "error" in mcp_server.log_drink("Coffee", 95)

    def test_log_into_default_period(self, store):
        """Drinks go to the first period and today's count is returned."""
        period = mcp_server.create_period("Now", date.today().isoformat(), date.today().isoformat())
        result = mcp_server.log_drink("Coffee", 95)

        assert result["entry"]["period_id"] == period["id"]
        assert result["drinks_today"] == 1

    def test_log_backdated(self, store):
        """An explicit timestamp is kept."""
        mcp_server.create_period("October", "2025-10-01", "2025-10-31")
        result = mcp_server.log_drink("Tea", 40, timestamp="2025-10-01T15:00")

        assert store.get_entry(result["entry"]["id"]).timestamp == datetime(2025, 10, 1, 15, 0)

    def test_log_invalid_amount(self, store):
        """Non-positive caffeine is rejected."""
        mcp_server.create_period("October", "2025-10-01", "2025-10-31")
        assert "error" in mcp_server.log_drink("Decaf", 0)

    def test_delete(self, store):
        """Deleting twice reports an error the second time."""
        mcp_server.create_period("October", "2025-10-01", "2025-10-31")
        entry_id = mcp_server.log_drink("Coffee", 95)["entry"]["id"]

        assert mcp_server.delete_drink(entry_id) == {"success": True}
        assert "error" in mcp_server.delete_drink(entry_id)


class TestQueryTools:
    """Tests for get_today, get_report and get_yearly_stats."""

    def test_get_today(self, store):
        """Today's drinks are counted and summed."""
        mcp_server.create_period("Now", date.today().isoformat(), date.today().isoformat())
        mcp_server.log_drink("Coffee", 95)
        mcp_server.log_drink("Tea", 40)

        today = mcp_server.get_today()
        assert today["drink_count"] == 2
        assert today["total_caffeine"] == 135

    def test_get_report(self, store):
        """Report matches the period's entries."""
        period = mcp_server.create_period("October", "2025-10-01", "2025-10-02")
        mcp_server.log_drink("Coffee", 100, timestamp="2025-10-01T09:00")
        mcp_server.log_drink("Coffee", 100, timestamp="2025-10-01T20:00")
        mcp_server.log_drink("Tea", 40, timestamp="2025-10-02T10:00")

        report = mcp_server.get_report(period["id"])
        assert report["statistics"]["total_caffeine"] == 240
        assert report["statistics"]["unique_days"] == 2
        assert report["daily"][0]["drink_counts"] == {"Coffee": 2}

    def test_get_yearly_stats(self, store):
        """Yearly stats include the year."""
        mcp_server.create_period("October", "2025-10-01", "2025-10-31")
        mcp_server.log_drink("Coffee", 100, timestamp="2025-10-01T09:00")

        stats = mcp_server.get_yearly_stats(2025)
        assert stats["year"] == 2025
        assert stats["total_caffeine"] == 100
        assert mcp_server.get_yearly_stats(2024)["total_drinks"] == 0
