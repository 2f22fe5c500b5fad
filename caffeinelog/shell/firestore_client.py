"""Firestore Client - Persistence for periods and drink entries.

This module handles all database I/O for the Firestore backend.
All I/O is contained here; business logic is in the core module.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from google.cloud import firestore

from ..core.models import DrinkEntry, DrinkEntryInput, Period, PeriodInput


logger = logging.getLogger(__name__)

PERIODS_COLLECTION = "periods"
ENTRIES_COLLECTION = "drink_entries"


@dataclass
class FirestoreConfig:
    """Configuration for Firestore client.

    Attributes:
        project_id: GCP project ID (None for default)
        database: Firestore database name (None for default database)
    """

    project_id: str | None = None
    database: str | None = None


def _period_to_doc(period: Period) -> dict[str, Any]:
    data = period.model_dump()
    # Dates are stored as ISO strings so they never pick up a time zone
    data["start_date"] = period.start_date.isoformat()
    data["end_date"] = period.end_date.isoformat()
    return data


def _period_from_doc(data: dict[str, Any]) -> Period:
    data.pop("created_at", None)
    for key in ("start_date", "end_date"):
        if isinstance(data.get(key), str):
            data[key] = date.fromisoformat(data[key][:10])
    return Period(**data)


def _entry_from_doc(data: dict[str, Any]) -> DrinkEntry:
    data.pop("created_at", None)
    return DrinkEntry(**data)


class CaffeineFirestoreClient:
    """Firestore implementation of the entry store.

    Document structure:
        periods/{period_id}: { name, start_date, end_date, hidden, created_at }
        drink_entries/{entry_id}: { period_id, drink_name, caffeine_amount, timestamp, created_at }

    created_at only exists to give listings a stable insertion order.
    """

    def __init__(self, config: FirestoreConfig | None = None) -> None:
        """Initialize Firestore client.

        Args:
            config: Firestore configuration
        """
        self.config = config or FirestoreConfig()
        self._client: firestore.Client | None = None

    @property
    def client(self) -> firestore.Client:
        """Lazy initialization of Firestore client."""
        if self._client is None:
            kwargs: dict[str, Any] = {}
            if self.config.project_id:
                kwargs["project"] = self.config.project_id
            if self.config.database:
                kwargs["database"] = self.config.database
            self._client = firestore.Client(**kwargs)
        return self._client

    def _period_ref(self, period_id: str) -> firestore.DocumentReference:
        """Get reference to a period document."""
        return self.client.collection(PERIODS_COLLECTION).document(period_id)

    def _entry_ref(self, entry_id: str) -> firestore.DocumentReference:
        """Get reference to a drink entry document."""
        return self.client.collection(ENTRIES_COLLECTION).document(entry_id)

    # ==================== Period Operations ====================

    def list_periods(self) -> list[Period]:
        """Fetch all periods in creation order.

        Returns:
            List of periods (empty on failure)
        """
        logger.debug("Listing periods")
        try:
            query = self.client.collection(PERIODS_COLLECTION).order_by("created_at")
            return [_period_from_doc(doc.to_dict()) for doc in query.stream()]
        except Exception as e:
            logger.error("Failed to list periods: %s", str(e))
            return []

    def get_period(self, period_id: str) -> Period | None:
        """Fetch a single period.

        Args:
            period_id: ID of the period

        Returns:
            Period if found, None otherwise
        """
        try:
            doc = self._period_ref(period_id).get()
            if not doc.exists:
                return None
            return _period_from_doc(doc.to_dict())
        except Exception as e:
            logger.error("Failed to fetch period: %s", str(e))
            return None

    def create_period(self, data: PeriodInput) -> Period | None:
        """Create a period.

        Args:
            data: Validated name and date range

        Returns:
            The stored Period, or None on failure
        """
        period = Period(**data.model_dump())
        logger.info("Creating period %s (%s)", period.id[:8], period.name)
        try:
            doc = _period_to_doc(period)
            doc["created_at"] = datetime.utcnow()
            self._period_ref(period.id).set(doc)
            return period
        except Exception as e:
            logger.error("Failed to create period: %s", str(e))
            return None

    def update_period(self, period_id: str, data: PeriodInput) -> Period | None:
        """Replace a period's name and dates, keeping its hidden flag.

        Args:
            period_id: ID of the period
            data: New name and date range

        Returns:
            Updated Period, or None if missing or the write failed
        """
        existing = self.get_period(period_id)
        if existing is None:
            logger.warning("Period not found: %s", period_id)
            return None

        period = Period(id=period_id, hidden=existing.hidden, **data.model_dump())
        try:
            self._period_ref(period_id).update({
                "name": period.name,
                "start_date": period.start_date.isoformat(),
                "end_date": period.end_date.isoformat(),
            })
            return period
        except Exception as e:
            logger.error("Failed to update period: %s", str(e))
            return None

    def set_period_hidden(self, period_id: str, hidden: bool) -> Period | None:
        """Show or hide a period.

        Args:
            period_id: ID of the period
            hidden: New hidden flag

        Returns:
            Updated Period, or None if missing or the write failed
        """
        existing = self.get_period(period_id)
        if existing is None:
            logger.warning("Period not found: %s", period_id)
            return None

        try:
            self._period_ref(period_id).update({"hidden": hidden})
            return existing.model_copy(update={"hidden": hidden})
        except Exception as e:
            logger.error("Failed to toggle period visibility: %s", str(e))
            return None

    def delete_period(self, period_id: str) -> bool:
        """Delete a period. Its drink entries are not touched.

        Args:
            period_id: ID of the period

        Returns:
            True if the period existed and was deleted
        """
        try:
            ref = self._period_ref(period_id)
            if not ref.get().exists:
                logger.warning("Period not found: %s", period_id)
                return False
            ref.delete()
            logger.info("Deleted period %s", period_id[:8])
            return True
        except Exception as e:
            logger.error("Failed to delete period: %s", str(e))
            return False

    # ==================== Drink Entry Operations ====================

    def list_entries(self) -> list[DrinkEntry]:
        """Fetch every drink entry in creation order."""
        logger.debug("Listing drink entries")
        try:
            query = self.client.collection(ENTRIES_COLLECTION).order_by("created_at")
            return [_entry_from_doc(doc.to_dict()) for doc in query.stream()]
        except Exception as e:
            logger.error("Failed to list drink entries: %s", str(e))
            return []

    def list_entries_by_period(self, period_id: str) -> list[DrinkEntry]:
        """Fetch the drink entries of one period.

        Args:
            period_id: ID of the period

        Returns:
            List of entries (may be empty)
        """
        logger.debug("Listing drink entries for period %s", period_id[:8])
        try:
            query = self.client.collection(ENTRIES_COLLECTION).where("period_id", "==", period_id)
            entries = [_entry_from_doc(doc.to_dict()) for doc in query.stream()]
            logger.debug("Found %d entries", len(entries))
            return entries
        except Exception as e:
            logger.error("Failed to list drink entries: %s", str(e))
            return []

    def get_entry(self, entry_id: str) -> DrinkEntry | None:
        try:
            doc = self._entry_ref(entry_id).get()
            if not doc.exists:
                return None
            return _entry_from_doc(doc.to_dict())
        except Exception as e:
            logger.error("Failed to fetch drink entry: %s", str(e))
            return None

    def create_entry(self, data: DrinkEntryInput) -> DrinkEntry | None:
        """Store a new drink entry.

        Args:
            data: Normalized entry fields; timestamp defaults to now

        Returns:
            The stored DrinkEntry, or None on failure
        """
        entry = DrinkEntry(
            period_id=data.period_id,
            drink_name=data.drink_name,
            caffeine_amount=data.caffeine_amount,
            timestamp=data.timestamp or datetime.now(),
        )
        logger.info("Logging %s (%dmg) in period %s", entry.drink_name, entry.caffeine_amount, entry.period_id[:8])
        try:
            doc = entry.model_dump()
            # Firestore reads naive datetimes as UTC; pin local wall time first
            doc["timestamp"] = entry.timestamp.astimezone()
            doc["created_at"] = datetime.utcnow()
            self._entry_ref(entry.id).set(doc)
            return entry
        except Exception as e:
            logger.error("Failed to create drink entry: %s", str(e))
            return None

    def delete_entry(self, entry_id: str) -> bool:
        """Delete a drink entry.

        Returns:
            True if the entry existed and was deleted
        """
        try:
            ref = self._entry_ref(entry_id)
            if not ref.get().exists:
                logger.warning("Entry not found: %s", entry_id)
                return False
            ref.delete()
            return True
        except Exception as e:
            logger.error("Failed to delete drink entry: %s", str(e))
            return False
