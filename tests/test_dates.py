"""Tests for local day resolution."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from gutrest.services.dates import LocalDateResolver
from tests.conftest import HOUR_MS, NEW_YORK, TOKYO, local_ms


def test_local_date_id_uses_local_fields_not_utc() -> None:
    resolver = LocalDateResolver(NEW_YORK)
    # 22:30 in New York is already the next day in UTC.
    late_evening = local_ms(NEW_YORK, 2024, 3, 1, 22, 30)

    utc_day = datetime.fromtimestamp(late_evening / 1000, tz=UTC).date()
    assert utc_day.isoformat() == "2024-03-02"
    assert resolver.local_date_id(late_evening) == "2024-03-01"


def test_local_date_id_east_of_utc() -> None:
    resolver = LocalDateResolver(TOKYO)
    early_morning = local_ms(TOKYO, 2024, 3, 2, 7, 0)

    assert resolver.local_date_id(early_morning) == "2024-03-02"


INDIA = timezone(timedelta(hours=5, minutes=30))


@pytest.mark.parametrize("tz", [NEW_YORK, TOKYO, INDIA])
def test_day_bounds_cover_local_midnight_to_midnight(tz) -> None:
    resolver = LocalDateResolver(tz)

    start, end = resolver.day_bounds("2024-05-10")

    assert start == local_ms(tz, 2024, 5, 10)
    assert end == start + 24 * HOUR_MS - 1
    assert resolver.local_date_id(start) == "2024-05-10"
    assert resolver.local_date_id(end) == "2024-05-10"
    assert resolver.local_date_id(end + 1) == "2024-05-11"


def test_day_bounds_follow_dst_transition() -> None:
    resolver = LocalDateResolver(NEW_YORK)

    start, end = resolver.day_bounds("2024-03-10")

    assert end - start + 1 == 23 * HOUR_MS
    assert resolver.local_date_id(end + 1) == "2024-03-11"


def test_offset_and_range_cross_month_boundaries() -> None:
    resolver = LocalDateResolver(NEW_YORK)

    assert resolver.offset_id("2024-03-01", -1) == "2024-02-29"
    assert resolver.offset_id("2023-12-31", 1) == "2024-01-01"
    assert resolver.date_range("2024-02-27", 4) == [
        "2024-02-27",
        "2024-02-28",
        "2024-02-29",
        "2024-03-01",
    ]


def test_today_and_yesterday_relative_to_now() -> None:
    resolver = LocalDateResolver(TOKYO)
    now = local_ms(TOKYO, 2024, 1, 1, 0, 30)

    assert resolver.today_id(now) == "2024-01-01"
    assert resolver.yesterday_id(now) == "2023-12-31"
    assert resolver.is_today("2024-01-01", now)
    assert resolver.is_yesterday("2023-12-31", now)
    assert not resolver.is_today("2023-12-31", now)


def test_host_local_timezone_is_consistent_with_bounds() -> None:
    resolver = LocalDateResolver()
    start, end = resolver.day_bounds("2024-06-15")

    assert resolver.local_date_id(start) == "2024-06-15"
    assert resolver.local_date_id(end) == "2024-06-15"
    assert resolver.local_date_id(start - 1) == "2024-06-14"
    assert resolver.local_date_id(end + 1) == "2024-06-16"
