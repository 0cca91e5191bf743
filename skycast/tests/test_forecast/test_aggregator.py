"""Tests for forecast day bucketing and the hourly slice."""

import os
import time
from datetime import UTC, date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from skycast.forecast.aggregator import (
    day_label,
    format_time,
    group_by_date,
    hourly_day_label,
    pick_representative,
    summarize_forecast,
)
from skycast.models.weather import ForecastReport
from skycast.tests.factories import make_point

MIDNIGHT = 1792368000  # 2026-10-19 00:00 UTC, a Monday
HOUR = 3600
NOW = datetime(2026, 10, 19, 0, 30, tzinfo=UTC)

# Central Europe leaves summer time at 2026-10-25 01:00 UTC.
BERLIN = ZoneInfo("Europe/Berlin")
OCT_24_18_UTC = 1792864800
OCT_26_UTC = 1792972800


def _series(count: int, start: int = MIDNIGHT, step_hours: int = 3) -> list:
    return [make_point(start + i * step_hours * HOUR, temp=float(i)) for i in range(count)]


class TestSummarizeForecast:
    def test_two_days_of_three_hourly_points(self, forecast_report: ForecastReport):
        summary = summarize_forecast(forecast_report.points, now=NOW, tz=UTC)

        assert [d.date for d in summary.days] == ["2026-10-19", "2026-10-20"]
        assert len(summary.hourly) == 8
        assert summary.hourly[0].point.dt == MIDNIGHT
        assert summary.hourly[-1].point.dt == MIDNIGHT + 21 * HOUR

    def test_day_min_max_from_temp(self, forecast_report: ForecastReport):
        today, tomorrow = summarize_forecast(forecast_report.points, now=NOW, tz=UTC).days

        assert (today.min_temp, today.max_temp) == (8.0, 15.3)
        assert (tomorrow.min_temp, tomorrow.max_temp) == (9.2, 16.2)
        for bucket in (today, tomorrow):
            assert bucket.min_temp <= bucket.max_temp
            assert all(bucket.min_temp <= p.temp <= bucket.max_temp for p in bucket.points)

    def test_representative_is_noonish(self, forecast_report: ForecastReport):
        today, tomorrow = summarize_forecast(forecast_report.points, now=NOW, tz=UTC).days

        assert today.representative.dt_txt == "2026-10-19 12:00:00"
        assert tomorrow.representative.dt_txt == "2026-10-20 12:00:00"

    def test_caps_at_five_days(self):
        points = _series(7 * 8)

        summary = summarize_forecast(points, now=NOW, tz=UTC)

        assert len(summary.days) == 5
        assert summary.days[0].date == "2026-10-19"
        assert summary.days[-1].date == "2026-10-23"

    def test_fewer_days_than_cap(self):
        points = _series(3 * 8)
        assert len(summarize_forecast(points, now=NOW, tz=UTC).days) == 3

    def test_buckets_sorted_regardless_of_input_order(self):
        points = list(reversed(_series(3 * 8)))

        days = summarize_forecast(points, now=NOW, tz=UTC).days

        assert [d.date for d in days] == ["2026-10-19", "2026-10-20", "2026-10-21"]

    def test_custom_limits(self):
        summary = summarize_forecast(_series(40), now=NOW, tz=UTC, max_days=2, hourly_points=4)
        assert len(summary.days) == 2
        assert len(summary.hourly) == 4

    def test_hourly_slice_is_unfiltered_prefix(self):
        # Points already in the past are still shown.
        later = datetime(2026, 10, 19, 20, 0, tzinfo=UTC)
        summary = summarize_forecast(_series(16), now=later, tz=UTC)
        assert [s.point.dt for s in summary.hourly] == [p.dt for p in _series(8)]

    def test_short_input_hourly(self):
        summary = summarize_forecast(_series(3), now=NOW, tz=UTC)
        assert len(summary.hourly) == 3
        assert len(summary.days) == 1

    def test_empty_input(self):
        summary = summarize_forecast([], now=NOW, tz=UTC)
        assert summary.days == []
        assert summary.hourly == []

    def test_labels(self):
        summary = summarize_forecast(_series(3 * 8), now=NOW, tz=UTC)

        assert [d.label for d in summary.days] == ["Today", "Tomorrow", "Wed, Oct 21"]

    def test_hourly_labels(self):
        points = [make_point(MIDNIGHT + 15 * HOUR), make_point(MIDNIGHT + 24 * HOUR)]

        hourly = summarize_forecast(points, now=NOW, tz=UTC).hourly

        assert (hourly[0].day_label, hourly[0].time_label) == ("Today", "3:00 PM")
        assert (hourly[1].day_label, hourly[1].time_label) == ("Tomorrow", "12:00 AM")

    def test_today_follows_now(self):
        next_day = NOW + timedelta(days=1)
        summary = summarize_forecast(_series(2 * 8), now=next_day, tz=UTC)
        assert [d.label for d in summary.days] == ["Mon, Oct 19", "Today"]

    def test_naive_now_taken_as_local(self):
        summary = summarize_forecast(_series(8), now=datetime(2026, 10, 19, 9), tz=UTC)
        assert summary.days[0].label == "Today"


class TestGroupByDate:
    def test_keys_are_utc_dates(self):
        plus_ten = timezone(timedelta(hours=10))
        late = make_point(MIDNIGHT + 23 * HOUR)
        # Local date in UTC+10 is already the 20th, key stays the UTC date.
        assert datetime.fromtimestamp(late.dt, plus_ten).date() == date(2026, 10, 20)
        assert list(group_by_date([late])) == ["2026-10-19"]

    def test_order_preserved_within_day(self):
        a = make_point(MIDNIGHT + 9 * HOUR)
        b = make_point(MIDNIGHT + 3 * HOUR)
        assert group_by_date([a, b]) == {"2026-10-19": [a, b]}


class TestPickRepresentative:
    def test_first_match_in_window(self):
        points = [make_point(MIDNIGHT + h * HOUR) for h in (9, 11, 14)]
        assert pick_representative(points, UTC) is points[1]

    def test_window_bounds_inclusive(self):
        points = [make_point(MIDNIGHT + h * HOUR) for h in (10, 14)]
        assert pick_representative(points, UTC) is points[1]

    def test_falls_back_to_middle(self):
        points = [make_point(MIDNIGHT + h * HOUR) for h in (0, 3, 6, 9)]
        assert pick_representative(points, UTC) is points[2]

    def test_single_point(self):
        only = make_point(MIDNIGHT + 21 * HOUR)
        assert pick_representative([only], UTC) is only

    def test_uses_local_hour(self):
        minus_three = timezone(timedelta(hours=-3))
        points = [make_point(MIDNIGHT + h * HOUR) for h in (12, 15)]
        # 12:00 UTC is 09:00 local, 15:00 UTC is 12:00 local
        assert pick_representative(points, minus_three) is points[1]


class TestLabels:
    def test_day_label(self):
        today = date(2026, 10, 19)
        assert day_label(today, today) == "Today"
        assert day_label(date(2026, 10, 20), today) == "Tomorrow"
        assert day_label(date(2026, 10, 23), today) == "Fri, Oct 23"
        assert day_label(date(2026, 10, 18), today) == "Sun, Oct 18"

    def test_hourly_day_label(self):
        today = date(2026, 10, 19)
        assert hourly_day_label(date(2026, 10, 21), today) == "Wed"
        assert hourly_day_label(date(2026, 10, 20), today) == "Tomorrow"

    def test_format_time(self):
        assert format_time(datetime(2026, 10, 19, 0, 0)) == "12:00 AM"
        assert format_time(datetime(2026, 10, 19, 9, 5)) == "9:05 AM"
        assert format_time(datetime(2026, 10, 19, 12, 0)) == "12:00 PM"
        assert format_time(datetime(2026, 10, 19, 23, 30)) == "11:30 PM"


@pytest.fixture
def berlin_host_tz():
    """Run the test with the host clock set to Europe/Berlin."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset not available")
    original = os.environ.get("TZ")
    os.environ["TZ"] = "Europe/Berlin"
    time.tzset()
    try:
        if not time.daylight:
            pytest.skip("host has no Europe/Berlin zone data")
        yield
    finally:
        if original is None:
            os.environ.pop("TZ", None)
        else:
            os.environ["TZ"] = original
        time.tzset()


class TestDaylightSavingChange:
    def test_representative_after_change(self):
        points = _series(8, start=OCT_26_UTC)
        # CET: 09:00 UTC is 10:00 local, 12:00 UTC is 13:00 local
        day = summarize_forecast(points, now=NOW, tz=BERLIN).days[0]
        assert day.representative.dt == OCT_26_UTC + 12 * HOUR

    def test_representative_before_change(self):
        points = _series(8, start=OCT_26_UTC - 2 * 24 * HOUR)
        # CEST: 09:00 UTC is 11:00 local
        day = summarize_forecast(points, now=NOW, tz=BERLIN).days[0]
        assert day.representative.dt == OCT_26_UTC - 2 * 24 * HOUR + 9 * HOUR

    def test_hourly_times_across_change(self):
        now = datetime(2026, 10, 24, 17, 0, tzinfo=UTC)
        hourly = summarize_forecast(_series(8, start=OCT_24_18_UTC), now=now, tz=BERLIN).hourly

        assert [s.time_label for s in hourly] == [
            "8:00 PM", "11:00 PM", "2:00 AM", "4:00 AM",
            "7:00 AM", "10:00 AM", "1:00 PM", "4:00 PM",
        ]
        assert [s.day_label for s in hourly[:3]] == ["Today", "Today", "Tomorrow"]

    def test_default_zone_follows_host_rules(self, berlin_host_tz):
        points = _series(8, start=OCT_26_UTC)

        day = summarize_forecast(points, now=NOW).days[0]

        assert day.representative.dt == OCT_26_UTC + 12 * HOUR
        local_hour = datetime.fromtimestamp(day.representative.dt, BERLIN).hour
        assert 11 <= local_hour <= 14

    def test_default_zone_hourly_times(self, berlin_host_tz):
        now = datetime(2026, 10, 24, 17, 0, tzinfo=UTC)

        hourly = summarize_forecast(_series(8, start=OCT_24_18_UTC), now=now).hourly

        assert hourly[2].time_label == "2:00 AM"
        assert hourly[3].time_label == "4:00 AM"
        assert hourly[0].day_label == "Today"

    def test_default_zone_pick_representative(self, berlin_host_tz):
        points = _series(8, start=OCT_26_UTC)
        assert pick_representative(points).dt == OCT_26_UTC + 12 * HOUR
