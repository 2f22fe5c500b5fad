"""Bulk Import - Pure functions for parsing pasted or uploaded CSV text.

Expected layout:

    drinkName,caffeineAmount,date,time
    Coffee,95,2025-10-01,09:30

All functions are pure: same input always produces same output, no side effects.
"""

import csv
import io
from datetime import datetime

from pydantic import ValidationError

from .models import BulkImportResult, DrinkEntryInput


VALID_HEADERS = (
    "drinkname,caffeineamount,date,time",
    "drink,caffeine,date,time",
)


def normalize_header(line: str) -> str:
    """Lowercase a header row and drop all whitespace."""
    return "".join(line.lower().split())


def parse_row(fields: list[str], period_id: str) -> DrinkEntryInput:
    """Turn one CSV row into an entry input.

    Raises:
        ValueError: With a short reason when the row is unusable
    """
    if len(fields) < 4:
        raise ValueError("Not enough columns")

    drink_name, caffeine_str, date_str, time_str = (f.strip() for f in fields[:4])

    if not drink_name:
        raise ValueError("Missing drink name")

    try:
        caffeine_amount = int(caffeine_str)
    except ValueError:
        raise ValueError("Invalid caffeine amount") from None
    if caffeine_amount <= 0:
        raise ValueError("Invalid caffeine amount")

    try:
        timestamp = datetime.fromisoformat(f"{date_str}T{time_str}")
    except ValueError:
        raise ValueError("Invalid date/time format") from None

    try:
        return DrinkEntryInput(
            period_id=period_id,
            drink_name=drink_name,
            caffeine_amount=caffeine_amount,
            timestamp=timestamp,
        )
    except ValidationError:
        raise ValueError("Invalid entry") from None


def parse_bulk_csv(text: str, period_id: str) -> BulkImportResult:
    """Parse bulk CSV text into entry inputs for one period.

    The batch is all-or-nothing: any row error rejects every entry.

    Args:
        text: CSV text with a header row
        period_id: Period the imported entries belong to

    Returns:
        BulkImportResult with entries, or errors ("Line N: reason")
    """
    lines = text.strip().splitlines()
    if len(lines) < 2:
        return BulkImportResult(errors=["CSV must have at least a header row and one data row"])

    if normalize_header(lines[0]) not in VALID_HEADERS:
        return BulkImportResult(
            errors=["CSV must have headers: drinkName, caffeineAmount, date, time (or variations)"]
        )

    entries: list[DrinkEntryInput] = []
    errors: list[str] = []

    for line_number, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue
        fields = next(csv.reader(io.StringIO(line)))
        try:
            entries.append(parse_row(fields, period_id))
        except ValueError as e:
            errors.append(f"Line {line_number}: {e}")

    if errors:
        return BulkImportResult(errors=errors)
    if not entries:
        return BulkImportResult(errors=["No valid entries found"])

    return BulkImportResult(entries=entries)
