"""Core Data Models - Pydantic models for type safety.

Persisted records (Period, DrinkEntry) validate at construction; derived
snapshots are recomputed on demand and never stored.
"""

from datetime import datetime
from datetime import date as DateType
from typing import Annotated, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
import uuid


ALL_TIME_LABEL = "All Time"


def _coerce_calendar_date(value):
    """Reduce a date-ish value to its year/month/day components.

    ISO strings are cut to their date part and datetimes lose their time,
    without any timezone conversion that could shift the day.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and len(value) > 10:
        return value[:10]
    return value


class PeriodInput(BaseModel):
    """Fields supplied when creating or editing a period."""

    name: str = Field(min_length=1, description="Display name of the period")
    start_date: DateType = Field(description="First day of the period (inclusive)")
    end_date: DateType = Field(description="Last day of the period (inclusive)")

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_calendar_date(cls, value):
        return _coerce_calendar_date(value)

    @model_validator(mode="after")
    def check_range(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class Period(PeriodInput):
    """A named date range used to scope drink entries and statistics."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    hidden: bool = Field(default=False, description="Hidden from selectors and visible-period totals")


class DrinkEntryInput(BaseModel):
    """Normalized shape handed to the store by every entry producer."""

    period_id: str = Field(min_length=1, description="Owning period (weak reference)")
    drink_name: str = Field(min_length=1, description="Free-text drink label")
    caffeine_amount: int = Field(gt=0, description="Caffeine in milligrams")
    timestamp: Optional[datetime] = Field(default=None, description="Time of consumption, now if omitted")


class DrinkEntry(BaseModel):
    """A single timestamped caffeine-consumption record."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    period_id: str = Field(min_length=1)
    drink_name: str = Field(min_length=1)
    caffeine_amount: int = Field(gt=0, description="Caffeine in milligrams")
    timestamp: datetime = Field(default_factory=datetime.now)


class CalendarDay(BaseModel):
    """One day of the calendar window."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(description="Three-letter weekday, e.g. 'Wed'")
    full_label: str = Field(description="Full weekday name, e.g. 'Wednesday'")
    calendar_date: DateType


class DayTally(BaseModel):
    """Per-day drink counts and caffeine sum within the active scope."""

    model_config = ConfigDict(frozen=True)

    calendar_date: DateType
    label: str
    full_label: str
    drink_counts: dict[str, int] = Field(default_factory=dict, description="Drink name -> occurrences, first-seen order")
    total_caffeine: int = Field(default=0, description="Sum of caffeine_amount for the day")
    total_drinks: int = 0


class StatisticsSnapshot(BaseModel):
    """Aggregate statistics for a subset of entries."""

    model_config = ConfigDict(frozen=True)

    total_caffeine: int = 0
    total_drinks: int = 0
    unique_days: int = 0
    avg_drinks_per_day: float = 0.0
    avg_caffeine_per_day: float = 0.0


class PeriodScope(BaseModel):
    """Entries logged against one period id."""

    kind: Literal["period"] = "period"
    period_id: str


class AllVisibleScope(BaseModel):
    """Entries whose owning period exists and is not hidden."""

    kind: Literal["all_visible"] = "all_visible"
    periods: list[Period] = Field(default_factory=list)


class YearScope(BaseModel):
    """Entries timestamped in one calendar year, any period."""

    kind: Literal["year"] = "year"
    year: int


class AllTimeScope(BaseModel):
    """Every entry, used when no period is active."""

    kind: Literal["all_time"] = "all_time"


ScopeSelector = Annotated[
    Union[PeriodScope, AllVisibleScope, YearScope, AllTimeScope],
    Field(discriminator="kind"),
]


class ReportSnapshot(BaseModel):
    """Everything the dashboard and the printable report render from."""

    model_config = ConfigDict(frozen=True)

    period_name: str
    start_date: DateType
    end_date: DateType
    statistics: StatisticsSnapshot
    window: tuple[CalendarDay, ...]
    daily: tuple[DayTally, ...] = ()


class BulkImportResult(BaseModel):
    """Outcome of parsing a bulk CSV import."""

    entries: list[DrinkEntryInput] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors and bool(self.entries)
