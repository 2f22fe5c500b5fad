"""Entry Store - Storage interface and backend selection.

Business logic never talks to a backend directly; it receives full snapshots
from an EntryStore and recomputes. Backends are swappable at startup.
"""

import logging
import os
from datetime import datetime
from typing import Protocol

from ..core.models import DrinkEntry, DrinkEntryInput, Period, PeriodInput


logger = logging.getLogger(__name__)


class EntryStore(Protocol):
    """Capabilities every storage backend provides."""

    def list_periods(self) -> list[Period]: ...

    def get_period(self, period_id: str) -> Period | None: ...

    def create_period(self, data: PeriodInput) -> Period | None: ...

    def update_period(self, period_id: str, data: PeriodInput) -> Period | None: ...

    def set_period_hidden(self, period_id: str, hidden: bool) -> Period | None: ...

    def delete_period(self, period_id: str) -> bool: ...

    def list_entries(self) -> list[DrinkEntry]: ...

    def list_entries_by_period(self, period_id: str) -> list[DrinkEntry]: ...

    def get_entry(self, entry_id: str) -> DrinkEntry | None: ...

    def create_entry(self, data: DrinkEntryInput) -> DrinkEntry | None: ...

    def delete_entry(self, entry_id: str) -> bool: ...


class InMemoryStore:
    """Dict-backed store; iteration order is insertion order.

    Suitable for local runs and tests. Nothing survives a restart.
    """

    def __init__(self) -> None:
        self._periods: dict[str, Period] = {}
        self._entries: dict[str, DrinkEntry] = {}

    # ==================== Period Operations ====================

    def list_periods(self) -> list[Period]:
        return list(self._periods.values())

    def get_period(self, period_id: str) -> Period | None:
        return self._periods.get(period_id)

    def create_period(self, data: PeriodInput) -> Period:
        period = Period(**data.model_dump())
        self._periods[period.id] = period
        logger.info("Created period %s (%s)", period.id[:8], period.name)
        return period

    def update_period(self, period_id: str, data: PeriodInput) -> Period | None:
        existing = self._periods.get(period_id)
        if existing is None:
            logger.warning("Period not found: %s", period_id)
            return None
        period = Period(id=period_id, hidden=existing.hidden, **data.model_dump())
        self._periods[period_id] = period
        return period

    def set_period_hidden(self, period_id: str, hidden: bool) -> Period | None:
        existing = self._periods.get(period_id)
        if existing is None:
            logger.warning("Period not found: %s", period_id)
            return None
        period = existing.model_copy(update={"hidden": hidden})
        self._periods[period_id] = period
        return period

    def delete_period(self, period_id: str) -> bool:
        # Entries of the period are left in place
        if self._periods.pop(period_id, None) is None:
            logger.warning("Period not found: %s", period_id)
            return False
        logger.info("Deleted period %s", period_id[:8])
        return True

    # ==================== Drink Entry Operations ====================

    def list_entries(self) -> list[DrinkEntry]:
        return list(self._entries.values())

    def list_entries_by_period(self, period_id: str) -> list[DrinkEntry]:
        return [e for e in self._entries.values() if e.period_id == period_id]

    def get_entry(self, entry_id: str) -> DrinkEntry | None:
        return self._entries.get(entry_id)

    def create_entry(self, data: DrinkEntryInput) -> DrinkEntry:
        entry = DrinkEntry(
            period_id=data.period_id,
            drink_name=data.drink_name,
            caffeine_amount=data.caffeine_amount,
            timestamp=data.timestamp or datetime.now(),
        )
        self._entries[entry.id] = entry
        logger.info("Logged %s (%dmg) in period %s", entry.drink_name, entry.caffeine_amount, entry.period_id[:8])
        return entry

    def delete_entry(self, entry_id: str) -> bool:
        if self._entries.pop(entry_id, None) is None:
            logger.warning("Entry not found: %s", entry_id)
            return False
        return True


# ==================== Backend Selection ====================

STORAGE_BACKEND_ENV = "STORAGE_BACKEND"

_store: EntryStore | None = None


def create_store_from_env() -> EntryStore:
    """Build the backend named by STORAGE_BACKEND (memory or firestore).

    Raises:
        ValueError: If the backend name is unknown
    """
    backend = os.environ.get(STORAGE_BACKEND_ENV, "memory").strip().lower()

    if backend == "memory":
        logger.info("Using in-memory storage")
        return InMemoryStore()

    if backend == "firestore":
        from .firestore_client import CaffeineFirestoreClient, FirestoreConfig

        config = FirestoreConfig(
            project_id=os.environ.get("FIRESTORE_PROJECT") or None,
            database=os.environ.get("FIRESTORE_DATABASE", "caffeinelog"),
        )
        logger.info("Using Firestore storage (database=%s)", config.database)
        return CaffeineFirestoreClient(config)

    raise ValueError(f"Unknown storage backend: {backend}")


def get_store() -> EntryStore:
    """Get or create the process-wide store."""
    global _store
    if _store is None:
        _store = create_store_from_env()
    return _store


def set_store(store: EntryStore | None) -> None:
    """Replace the process-wide store (None resets to lazy creation)."""
    global _store
    _store = store
