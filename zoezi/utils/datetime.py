# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities for Zoezi.

All timestamps are stored in UTC and all Python datetimes are
timezone-aware. SQLite hands back naive values, so anything read from the
database is passed through ensure_utc before comparison.

Usage:
------
    from zoezi.utils.datetime import utc_now

    created_at = mapped_column(DateTime(timezone=True), default=utc_now)
"""

from datetime import date, datetime, time, timezone


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime representing current UTC time.
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure a datetime is timezone-aware UTC.

    Args:
        dt: A datetime object (naive or aware) or None.

    Returns:
        Timezone-aware UTC datetime or None. Naive values are assumed UTC.
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def is_expired(expiry: datetime | None, now: datetime | None = None) -> bool:
    """Check if a datetime has passed.

    Args:
        expiry: The expiry datetime to check.
        now: Reference time, defaults to the current UTC time.

    Returns:
        True if expired or expiry is None, False otherwise.
    """
    if expiry is None:
        return True

    return (now or utc_now()) > ensure_utc(expiry)


def add_years(dt: datetime, years: int) -> datetime:
    """Shift a datetime by whole calendar years.

    February 29th lands on February 28th in non-leap target years.

    Args:
        dt: Datetime to shift.
        years: Number of years to add.

    Returns:
        Shifted datetime with the same time of day and tzinfo.
    """
    try:
        return dt.replace(year=dt.year + years)
    except ValueError:
        return dt.replace(year=dt.year + years, day=28)


def parse_clock(value: str) -> time:
    """Parse an ``HH:MM`` clock string.

    Args:
        value: Clock string such as ``"08:30"``.

    Returns:
        Naive time of day.

    Raises:
        ValueError: If the string is not a valid clock time.
    """
    hours, _, minutes = value.partition(":")
    return time(int(hours), int(minutes or 0))


def combine_utc(day: date, clock: str) -> datetime:
    """Combine a calendar date and an ``HH:MM`` clock string in UTC.

    Args:
        day: Calendar date.
        clock: Clock string.

    Returns:
        Timezone-aware UTC datetime.
    """
    return datetime.combine(day, parse_clock(clock), tzinfo=timezone.utc)


def format_iso(dt: datetime | None) -> str | None:
    """Format a datetime as ISO 8601 string.

    Args:
        dt: Datetime to format.

    Returns:
        ISO 8601 formatted string or None.
    """
    if dt is None:
        return None

    return ensure_utc(dt).isoformat()
