from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from app.utils.time import (
    LOCAL_TZ,
    is_within_inclusive_local_range,
    is_within_open_local_range,
    local_day_of,
    to_local_day_end,
    to_local_day_start,
    weekday_index,
)


class TestToLocalDayStart:
    def test_none_and_empty(self):
        assert to_local_day_start(None) is None
        assert to_local_day_start("") is None

    def test_date(self):
        result = to_local_day_start(date(2026, 10, 19))
        assert result == datetime(2026, 10, 19, tzinfo=LOCAL_TZ)

    def test_aware_datetime_uses_utc_calendar_day(self):
        # 02:00 UTC on the 20th is still the 19th in Mexico City, but stored
        # promotion dates are calendar days, so the UTC date wins
        result = to_local_day_start(datetime(2026, 10, 20, 2, 0, tzinfo=timezone.utc))
        assert result.date() == date(2026, 10, 20)
        assert result.tzinfo == LOCAL_TZ
        assert result.hour == 0

    def test_iso_string_prefix(self):
        result = to_local_day_start("2026-10-19T06:00:00.000Z")
        assert result == datetime(2026, 10, 19, tzinfo=LOCAL_TZ)

    def test_invalid_string(self):
        assert to_local_day_start("19/10/2026") is None

    def test_custom_zone(self):
        tz = ZoneInfo("UTC")
        assert to_local_day_start(date(2026, 1, 1), tz=tz) == datetime(2026, 1, 1, tzinfo=tz)


class TestToLocalDayEnd:
    def test_last_microsecond(self):
        end = to_local_day_end(date(2026, 10, 19))
        assert end == datetime(2026, 10, 20, tzinfo=LOCAL_TZ) - timedelta(microseconds=1)

    def test_none(self):
        assert to_local_day_end(None) is None


class TestLocalDay:
    def test_naive_datetime_is_local_wall_time(self):
        assert local_day_of(datetime(2026, 10, 19, 23, 59)) == datetime(2026, 10, 19, tzinfo=LOCAL_TZ)

    def test_aware_datetime_converted(self):
        # 03:00 UTC on the 20th is the evening of the 19th in Mexico City
        now = datetime(2026, 10, 20, 3, 0, tzinfo=timezone.utc)
        assert local_day_of(now).date() == date(2026, 10, 19)

    @pytest.mark.parametrize(
        "day, expected",
        [
            (date(2026, 10, 18), 0),
            (date(2026, 10, 19), 1),
            (date(2026, 10, 21), 3),
            (date(2026, 10, 24), 6),
        ],
    )
    def test_weekday_index_sunday_first(self, day, expected):
        assert weekday_index(day) == expected


class TestRanges:
    start = datetime(2026, 10, 1, tzinfo=LOCAL_TZ)
    end = datetime(2026, 10, 31, tzinfo=LOCAL_TZ)

    def test_inclusive_bounds(self):
        assert is_within_inclusive_local_range(self.start, self.end, self.start)
        assert is_within_inclusive_local_range(self.start, self.end, self.end)
        assert not is_within_inclusive_local_range(self.start, self.end, self.end + timedelta(days=1))

    def test_inclusive_missing_bound_is_false(self):
        assert not is_within_inclusive_local_range(None, self.end, self.start)
        assert not is_within_inclusive_local_range(self.start, None, self.start)
        assert not is_within_inclusive_local_range(None, None, self.start)

    def test_open_missing_bounds(self):
        before = self.start - timedelta(days=1)
        after = self.end + timedelta(days=1)

        assert is_within_open_local_range(None, None, before)
        assert is_within_open_local_range(self.start, None, after)
        assert not is_within_open_local_range(self.start, None, before)
        assert is_within_open_local_range(None, self.end, before)
        assert not is_within_open_local_range(None, self.end, after)
