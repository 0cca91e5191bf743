"""Group 3-hourly forecast points into daily buckets and an hourly slice.

Every function here is pure: the summary is recomputed from the point list
on each call and nothing is cached.
"""

from collections.abc import Sequence
from datetime import UTC, date, datetime, timedelta, tzinfo

from skycast.models.forecast import DailyBucket, ForecastSummary, HourlySlot
from skycast.models.weather import ForecastPoint

MAX_DAYS = 5
HOURLY_POINTS = 8
NOON_START_HOUR = 11
NOON_END_HOUR = 14


def summarize_forecast(
    points: Sequence[ForecastPoint],
    now: datetime | None = None,
    tz: tzinfo | None = None,
    max_days: int = MAX_DAYS,
    hourly_points: int = HOURLY_POINTS,
) -> ForecastSummary:
    """Build up to `max_days` daily buckets plus the leading hourly slice.

    The hourly slice is the first `hourly_points` points as given; it is not
    filtered against `now`, so callers are expected to pass a list that
    starts at the present.

    `tz=None` uses the host zone with its DST rules applied per instant.
    """
    today = _local_today(now, tz)
    return ForecastSummary(
        days=daily_buckets(points, today, tz, max_days),
        hourly=hourly_slice(points, today, tz, hourly_points),
    )


def daily_buckets(
    points: Sequence[ForecastPoint],
    today: date,
    tz: tzinfo | None,
    max_days: int = MAX_DAYS,
) -> list[DailyBucket]:
    grouped = group_by_date(points)
    buckets = []
    for key in sorted(grouped)[:max_days]:
        day_points = grouped[key]
        temps = [p.temp for p in day_points]
        buckets.append(
            DailyBucket(
                date=key,
                label=day_label(date.fromisoformat(key), today),
                representative=pick_representative(day_points, tz),
                min_temp=min(temps),
                max_temp=max(temps),
                points=tuple(day_points),
            )
        )
    return buckets


def hourly_slice(
    points: Sequence[ForecastPoint],
    today: date,
    tz: tzinfo | None,
    count: int = HOURLY_POINTS,
) -> list[HourlySlot]:
    slots = []
    for point in points[:count]:
        when = _local_datetime(point, tz)
        slots.append(
            HourlySlot(
                point=point,
                day_label=hourly_day_label(when.date(), today),
                time_label=format_time(when),
            )
        )
    return slots


def group_by_date(points: Sequence[ForecastPoint]) -> dict[str, list[ForecastPoint]]:
    """Group points by their UTC calendar date, keyed "YYYY-MM-DD".

    Input order is preserved inside each group.
    """
    grouped: dict[str, list[ForecastPoint]] = {}
    for point in points:
        key = datetime.fromtimestamp(point.dt, UTC).date().isoformat()
        grouped.setdefault(key, []).append(point)
    return grouped


def pick_representative(
    points: Sequence[ForecastPoint], tz: tzinfo | None = None
) -> ForecastPoint:
    """First point with a local hour in [11, 14], else the middle point."""
    for point in points:
        if NOON_START_HOUR <= _local_datetime(point, tz).hour <= NOON_END_HOUR:
            return point
    return points[len(points) // 2]


def day_label(day: date, today: date) -> str:
    """Today, Tomorrow, or a short date such as "Mon, Oct 20"."""
    relative = _relative_label(day, today)
    if relative:
        return relative
    return f"{day:%a, %b} {day.day}"


def hourly_day_label(day: date, today: date) -> str:
    """Today, Tomorrow, or the short weekday name."""
    return _relative_label(day, today) or f"{day:%a}"


def format_time(when: datetime) -> str:
    """12-hour clock without a leading zero, e.g. "3:00 PM"."""
    hour = when.hour % 12 or 12
    return f"{hour}:{when:%M %p}"


def _relative_label(day: date, today: date) -> str:
    if day == today:
        return "Today"
    if day == today + timedelta(days=1):
        return "Tomorrow"
    return ""


def _local_today(now: datetime | None, tz: tzinfo | None) -> date:
    if now is None:
        now = datetime.now(tz)
    elif now.tzinfo is None:
        return now.date()
    return now.astimezone(tz).date()


def _local_datetime(point: ForecastPoint, tz: tzinfo | None) -> datetime:
    # tz=None resolves each instant in the host zone, so DST changes inside
    # the forecast window shift the offset point by point.
    if tz is None:
        return datetime.fromtimestamp(point.dt).astimezone()
    return datetime.fromtimestamp(point.dt, tz)
