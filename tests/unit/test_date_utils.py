"""Unit tests for calendar date helpers"""

import pytest
from datetime import date, datetime, timezone

from crediario.utils.date_utils import (
    add_months,
    calendar_today,
    clamp_day,
    format_utc_timestamp,
    next_month,
    parse_calendar_date,
    parse_timestamp,
    to_iso_timestamp,
)


def test_clamp_day():
    assert clamp_day(2025, 2, 31) == date(2025, 2, 28)
    assert clamp_day(2024, 2, 31) == date(2024, 2, 29)
    assert clamp_day(2025, 4, 31) == date(2025, 4, 30)
    assert clamp_day(2025, 5, 31) == date(2025, 5, 31)


def test_add_months_crosses_year():
    assert add_months(date(2025, 11, 30), 3) == date(2026, 2, 28)
    assert add_months(date(2025, 1, 15), 0) == date(2025, 1, 15)


def test_next_month():
    assert next_month(2025, 12) == (2026, 1)
    assert next_month(2025, 3) == (2025, 4)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2025-03-10", date(2025, 3, 10)),
        ("2025-03-10T12:00:00.000Z", date(2025, 3, 10)),
        ("2025-03-10T01:00:00-03:00", date(2025, 3, 10)),
        ("2025-03-10T23:00:00-03:00", date(2025, 3, 10)),
        ("2025-03-10T00:30:00+09:00", date(2025, 3, 10)),
        (datetime(2025, 3, 10, 23, 0, tzinfo=timezone.utc), date(2025, 3, 10)),
        (datetime(2025, 3, 10, 8, 30), date(2025, 3, 10)),
        (date(2025, 3, 10), date(2025, 3, 10)),
        ("", None),
        ("   ", None),
        (None, None),
        ("garbage", None),
        (20250310, None),
    ],
)
def test_parse_calendar_date(value, expected):
    assert parse_calendar_date(value) == expected


def test_parse_timestamp_is_utc():
    parsed = parse_timestamp("2024-12-01T10:00:00.000Z")

    assert parsed == datetime(2024, 12, 1, 10, tzinfo=timezone.utc)
    assert parse_timestamp("nope") is None
    assert parse_timestamp(None) is None


def test_wire_timestamp_format():
    assert to_iso_timestamp(date(2025, 3, 10)) == "2025-03-10T12:00:00.000Z"
    assert format_utc_timestamp(datetime(2025, 3, 10, 9, 5, 7, tzinfo=timezone.utc)) == "2025-03-10T09:05:07.000Z"


def test_calendar_today_uses_business_timezone():
    late_evening = datetime(2025, 3, 11, 2, 0, tzinfo=timezone.utc)

    assert calendar_today(late_evening, "America/Sao_Paulo") == date(2025, 3, 10)
    assert calendar_today(late_evening) == date(2025, 3, 11)
    assert calendar_today(date(2025, 1, 1), "America/Sao_Paulo") == date(2025, 1, 1)
