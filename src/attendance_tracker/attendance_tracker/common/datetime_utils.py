from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import Optional

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)")


def parse_optional_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    return parse_iso_date(value)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last calendar day of the given month."""
    if not 1 <= month <= 12:
        raise ValidationError("Month must be between 1 and 12")
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def resolve_month(month: Optional[str], year: Optional[str], *, today: date) -> tuple[int, int]:
    """Query-string month/year, defaulting to the month of ``today``."""
    try:
        m = int(month) if month else today.month
        y = int(year) if year else today.year
    except ValueError:
        raise ValidationError("Month and year must be numbers")
    month_bounds(y, m)
    return y, m


def display_datetime(value: Optional[datetime]) -> str:
    """Human readable instant, e.g. ``01/05/2026, 09:15:00 AM``."""
    if value is None:
        return ""
    return value.strftime("%m/%d/%Y, %I:%M:%S %p")


def iso_or_none(value) -> Optional[str]:
    return value.isoformat() if value is not None else None
