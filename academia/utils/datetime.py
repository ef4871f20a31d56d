# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities for the Academia API.

All timestamps are stored in UTC and all Python datetimes are
timezone-aware. Attendance days are keyed by UTC midnight.
"""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime representing current UTC time.
    """
    return datetime.now(timezone.utc)


def day_start(day: date) -> datetime:
    """Get midnight UTC for a calendar day.

    Args:
        day: Calendar date.

    Returns:
        Timezone-aware datetime at 00:00:00 UTC on that day.
    """
    return datetime(day.year, day.month, day.day, tzinfo=timezone.utc)


def utc_today_start() -> datetime:
    """Get the start of today in UTC (midnight).

    Returns:
        Timezone-aware datetime for today at 00:00:00 UTC.
    """
    return day_start(utc_now().date())


def month_range(year: int, month: int) -> tuple[datetime, datetime]:
    """Get the half-open [start, end) range covering a month.

    Args:
        year: Four digit year.
        month: Month number, 1-12.

    Returns:
        Tuple of (first day midnight, first day of next month midnight).

    Raises:
        ValueError: If month is out of range.
    """
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return start, end


def year_range(year: int) -> tuple[datetime, datetime]:
    """Get the half-open [start, end) range covering a year.

    Args:
        year: Four digit year.

    Returns:
        Tuple of (January 1st midnight, next January 1st midnight).
    """
    return (
        datetime(year, 1, 1, tzinfo=timezone.utc),
        datetime(year + 1, 1, 1, tzinfo=timezone.utc),
    )
