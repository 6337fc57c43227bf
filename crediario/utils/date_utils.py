"""Date manipulation utilities"""

import calendar
from datetime import date, datetime, time, timezone
from typing import Any, Optional
from zoneinfo import ZoneInfo


def last_day_of_month(year: int, month: int) -> int:
    """Number of days in the given month"""
    return calendar.monthrange(year, month)[1]


def clamp_day(year: int, month: int, day: int) -> date:
    """Build a date, pulling the day back to the month's last day when it overflows"""
    return date(year, month, min(day, last_day_of_month(year, month)))


def add_months(from_date: date, months: int) -> date:
    """Shift a date by whole months (Jan 31 + 1 month -> Feb 28/29)"""
    month_index = from_date.month - 1 + months
    year = from_date.year + month_index // 12
    month = month_index % 12 + 1
    return clamp_day(year, month, from_date.day)


def next_month(year: int, month: int) -> tuple[int, int]:
    """(year, month) of the following month"""
    if month == 12:
        return year + 1, 1
    return year, month + 1


def parse_calendar_date(value: Any) -> Optional[date]:
    """
    Read a calendar date from a date, datetime or ISO-8601 string.

    Timestamps keep the calendar date they were written with, whatever their
    offset: "2025-03-10T23:00:00-03:00" is March 10. Store date-only values sit
    at the neutral hour in UTC, so they read back as their UTC date. Returns
    None when the value is empty or does not parse.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        # fromisoformat only accepts a trailing "Z" from 3.11 on
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return parse_calendar_date(datetime.fromisoformat(text))
    except ValueError:
        return None


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Read an aware UTC datetime from an ISO-8601 string; None when absent or invalid"""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def to_neutral_timestamp(day: date, hour: int = 12) -> datetime:
    """Calendar date -> UTC datetime at a fixed hour, so no timezone shifts the day"""
    return datetime.combine(day, time(hour=hour), tzinfo=timezone.utc)


def format_utc_timestamp(moment: datetime) -> str:
    """JavaScript-style ISO string: '2025-03-10T12:00:00.000Z'"""
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.000Z")


def to_iso_timestamp(day: date, hour: int = 12) -> str:
    """Wire format for date-only values"""
    return format_utc_timestamp(to_neutral_timestamp(day, hour))


def calendar_today(now: date | datetime | None = None, tz_name: str | None = None) -> date:
    """
    Resolve "now" to a calendar date.

    Aware datetimes are converted to the business timezone first; naive
    datetimes and plain dates are taken as already local.
    """
    if now is None:
        zone = ZoneInfo(tz_name) if tz_name else None
        return datetime.now(zone).date()
    if isinstance(now, datetime):
        if now.tzinfo is not None and tz_name:
            return now.astimezone(ZoneInfo(tz_name)).date()
        return now.date()
    return now
