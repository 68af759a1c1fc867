"""Time utilities for timezone-aware UTC datetimes and calendar dates."""

from datetime import UTC, date, datetime


def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime for defaults and onupdate hooks."""
    return datetime.now(UTC)


def local_today() -> date:
    """Calendar date on the server clock, used for form and report defaults."""
    return date.today()


def start_of_year(day: date) -> date:
    return date(day.year, 1, 1)
