from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pytest

from score_engine.day_boundary import day_range, day_sequence, trailing_days
from score_engine.errors import InvalidConfiguration


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def test_before_cutoff_belongs_to_previous_day():
    start, end = day_range(utc(2024, 1, 10, 2), cutoff_hour=4)
    assert start == utc(2024, 1, 9, 4)
    assert end == utc(2024, 1, 10, 4)


def test_after_cutoff_belongs_to_same_day():
    start, end = day_range(utc(2024, 1, 10, 16), cutoff_hour=4)
    assert start == utc(2024, 1, 10, 4)
    assert end == utc(2024, 1, 11, 4)


def test_instant_on_boundary_starts_new_day():
    start, _ = day_range(utc(2024, 1, 10, 4), cutoff_hour=4)
    assert start == utc(2024, 1, 10, 4)


def test_range_contains_instant_for_every_cutoff():
    instants = [utc(2024, 1, 10, hour, minute) for hour in range(24) for minute in (0, 59)]
    instants.append(utc(2024, 12, 31, 23, 59, 59))
    for cutoff in range(24):
        for instant in instants:
            start, end = day_range(instant, cutoff)
            assert start <= instant < end
            assert end - start == timedelta(hours=24)
            assert start.hour == cutoff


def test_naive_datetimes_stay_naive():
    start, end = day_range(datetime(2024, 1, 10, 2), cutoff_hour=4)
    assert start == datetime(2024, 1, 9, 4)
    assert end.tzinfo is None


def test_explicit_zone_converts_instant():
    try:
        zone = ZoneInfo("Europe/Berlin")
    except ZoneInfoNotFoundError:
        pytest.skip("tz database not available")
    # 02:30 UTC is 03:30 in Berlin (winter), still before a 4am cutoff
    start, _ = day_range(utc(2024, 1, 10, 2, 30), cutoff_hour=4, tz=zone)
    assert start == datetime(2024, 1, 9, 4, tzinfo=zone)


def test_dst_day_keeps_cutoff_on_wall_clock():
    try:
        zone = ZoneInfo("America/New_York")
    except ZoneInfoNotFoundError:
        pytest.skip("tz database not available")
    instant = datetime(2024, 3, 10, 12, tzinfo=zone)
    start, end = day_range(instant, cutoff_hour=0)
    assert (start.hour, end.hour) == (0, 0)
    assert start <= instant < end
    elapsed = end.astimezone(timezone.utc) - start.astimezone(timezone.utc)
    assert elapsed == timedelta(hours=23)


@pytest.mark.parametrize("cutoff", [-1, 24, 4.5, True, "4"])
def test_invalid_cutoff_rejected(cutoff):
    with pytest.raises(InvalidConfiguration):
        day_range(utc(2024, 1, 10, 2), cutoff_hour=cutoff)


def test_day_sequence_and_trailing_days():
    start = utc(2024, 1, 1, 4)
    assert day_sequence(start, 3) == [start, utc(2024, 1, 2, 4), utc(2024, 1, 3, 4)]
    assert day_sequence(start, 0) == []

    days = trailing_days(utc(2024, 1, 10, 2), 3, cutoff_hour=4)
    assert days == [utc(2024, 1, 7, 4), utc(2024, 1, 8, 4), utc(2024, 1, 9, 4)]
